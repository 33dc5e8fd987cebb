"""
Unit tests for the CLI.

Tests the command group, global options and the hash, root, prove, verify
and bench commands.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from merkle_tree.cli.main import cli
from merkle_tree.hashing import HashlibEngine
from merkle_tree.tree import MerkleTree


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def leaf_file(temp_dir: Path) -> Path:
    path = temp_dir / "leaves.txt"
    path.write_text("a\nb\nc\nd\n")
    return path


def _invoke(runner, config_path, *args):
    return runner.invoke(cli, ['-c', str(config_path), '-l', 'ERROR', *args])


class TestCLIMain:
    """Test CLI main entry point."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert 'merkle-tree' in result.output
        assert '--config' in result.output
        assert '--log-level' in result.output
        assert '--verbose' in result.output
        for command in ('hash', 'root', 'prove', 'verify', 'bench'):
            assert command in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert 'merkle-tree' in result.output

    def test_invalid_config(self, runner, make_config_yaml):
        config_path = make_config_yaml(hash_algorithm="md5")

        result = runner.invoke(cli, ['-c', str(config_path), 'hash', 'a'])

        assert result.exit_code == 1
        assert 'Invalid configuration' in result.output

    def test_nonexistent_config_uses_defaults(self, runner, temp_dir):
        result = _invoke(runner, temp_dir / "missing.yaml", 'hash', 'a')

        assert result.exit_code == 0
        assert result.stdout.strip() == MerkleTree.hash(b"a").hex()


class TestHashCommand:

    def test_hash(self, runner, sample_config_path):
        result = _invoke(runner, sample_config_path, 'hash', 'a', 'b')

        assert result.exit_code == 0
        assert result.stdout.split() == [MerkleTree.hash(b"a").hex(), MerkleTree.hash(b"b").hex()]

    def test_hash_with_configured_algorithm(self, runner, make_config_yaml):
        config_path = make_config_yaml(hash_algorithm="sha256")

        result = _invoke(runner, config_path, 'hash', 'a')

        assert result.stdout.strip() == HashlibEngine("sha256").hash(b"a").hex()

    def test_hash_requires_data(self, runner, sample_config_path):
        result = _invoke(runner, sample_config_path, 'hash')

        assert result.exit_code != 0


class TestRootCommand:

    def test_root(self, runner, sample_config_path, leaf_file):
        result = _invoke(runner, sample_config_path, 'root', str(leaf_file))

        expected = MerkleTree([MerkleTree.hash(c.encode()) for c in "abcd"]).root()
        assert result.exit_code == 0
        assert result.stdout.strip() == expected.hex()

    def test_root_skips_blank_lines(self, runner, sample_config_path, temp_dir):
        path = temp_dir / "blank.txt"
        path.write_text("a\n\nb\n\n")

        result = _invoke(runner, sample_config_path, 'root', str(path))

        expected = MerkleTree([MerkleTree.hash(b"a"), MerkleTree.hash(b"b")]).root()
        assert result.stdout.strip() == expected.hex()

    def test_root_hashed_input(self, runner, sample_config_path, temp_dir):
        leaves = [MerkleTree.hash(c.encode()) for c in "ab"]
        path = temp_dir / "digests.txt"
        path.write_text("\n".join(leaf.hex() for leaf in leaves) + "\n")

        result = _invoke(runner, sample_config_path, 'root', '--hashed', str(path))

        assert result.exit_code == 0
        assert result.stdout.strip() == MerkleTree(leaves).root().hex()

    def test_root_rejects_non_power_of_two(self, runner, sample_config_path, temp_dir):
        path = temp_dir / "three.txt"
        path.write_text("a\nb\nc\n")

        result = _invoke(runner, sample_config_path, 'root', str(path))

        assert result.exit_code == 1
        assert 'not a power of two' in result.output

    def test_root_with_configured_padding(self, runner, make_config_yaml, temp_dir):
        path = temp_dir / "three.txt"
        path.write_text("a\nb\nc\n")
        config_path = make_config_yaml(padding="duplicate_last")

        result = _invoke(runner, config_path, 'root', str(path))

        leaves = [MerkleTree.hash(c.encode()) for c in "abcc"]
        assert result.exit_code == 0
        assert result.stdout.strip() == MerkleTree(leaves).root().hex()

    def test_root_empty_file(self, runner, sample_config_path, temp_dir):
        path = temp_dir / "empty.txt"
        path.write_text("\n")

        result = _invoke(runner, sample_config_path, 'root', str(path))

        assert result.exit_code == 1
        assert 'zero leaves' in result.output

    def test_root_verbose(self, runner, sample_config_path, leaf_file):
        result = _invoke(runner, sample_config_path, '-v', 'root', str(leaf_file))

        assert result.exit_code == 0
        assert 'Depth: 2' in result.stdout
        assert 'sha3_256' in result.stdout


class TestProveAndVerify:

    def test_prove_document(self, runner, sample_config_path, leaf_file):
        result = _invoke(runner, sample_config_path, 'prove', str(leaf_file), 'c')

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        leaves = [MerkleTree.hash(c.encode()) for c in "abcd"]
        tree = MerkleTree(leaves)
        assert document["algorithm"] == "sha3_256"
        assert document["root"] == tree.root().hex()
        assert document["leaf"] == leaves[2].hex()
        assert document["offset"] == 2
        assert document["depth"] == 2
        assert document["proof"] == [
            {"direction": "right", "sibling": leaves[3].hex()},
            {"direction": "left", "sibling": MerkleTree.combine(leaves[0], leaves[1]).hex()},
        ]

    def test_prove_missing_leaf(self, runner, sample_config_path, leaf_file):
        result = _invoke(runner, sample_config_path, 'prove', str(leaf_file), 'z')

        assert result.exit_code == 1
        assert 'Cannot find leaf' in result.output

    def test_prove_then_verify(self, runner, sample_config_path, leaf_file, temp_dir):
        proof_path = temp_dir / "proof.json"

        result = _invoke(runner, sample_config_path, 'prove', str(leaf_file), 'b', '-o', str(proof_path))
        assert result.exit_code == 0
        assert proof_path.exists()

        result = _invoke(runner, sample_config_path, 'verify', str(proof_path))
        assert result.exit_code == 0
        assert 'Proof is valid' in result.output

    def test_verify_with_other_leaf(self, runner, sample_config_path, leaf_file, temp_dir):
        proof_path = temp_dir / "proof.json"
        _invoke(runner, sample_config_path, 'prove', str(leaf_file), 'b', '-o', str(proof_path))

        result = _invoke(runner, sample_config_path, 'verify', str(proof_path), '--leaf', 'c')

        assert result.exit_code == 1
        assert 'Proof is invalid' in result.output

    def test_verify_against_other_root(self, runner, sample_config_path, leaf_file, temp_dir):
        proof_path = temp_dir / "proof.json"
        _invoke(runner, sample_config_path, 'prove', str(leaf_file), 'b', '-o', str(proof_path))

        other_root = MerkleTree.hash(b"other").hex()
        result = _invoke(runner, sample_config_path, 'verify', str(proof_path), '--root', other_root)

        assert result.exit_code == 1

    def test_verify_uses_document_algorithm(self, runner, make_config_yaml, leaf_file, temp_dir):
        """Test a proof made with one algorithm verifies under a different configured default."""
        proof_path = temp_dir / "proof.json"
        sha256_config = make_config_yaml(hash_algorithm="sha256")
        _invoke(runner, sha256_config, 'prove', str(leaf_file), 'a', '-o', str(proof_path))

        default_config = temp_dir / "default.yaml"
        default_config.write_text("logging:\n  level: ERROR\n")
        result = _invoke(runner, default_config, 'verify', str(proof_path))

        assert json.loads(proof_path.read_text())["algorithm"] == "sha256"
        assert result.exit_code == 0

    def test_verify_tampered_document(self, runner, sample_config_path, leaf_file, temp_dir):
        proof_path = temp_dir / "proof.json"
        _invoke(runner, sample_config_path, 'prove', str(leaf_file), 'd', '-o', str(proof_path))

        document = json.loads(proof_path.read_text())
        document["proof"][0]["direction"] = "right"
        proof_path.write_text(json.dumps(document))

        result = _invoke(runner, sample_config_path, 'verify', str(proof_path))

        assert result.exit_code == 1

    def test_verify_malformed_document(self, runner, sample_config_path, temp_dir):
        proof_path = temp_dir / "proof.json"
        proof_path.write_text("{not json")

        result = _invoke(runner, sample_config_path, 'verify', str(proof_path))

        assert result.exit_code == 1
        assert 'Error:' in result.output

    def test_verify_document_without_root(self, runner, sample_config_path, temp_dir):
        proof_path = temp_dir / "proof.json"
        proof_path.write_text(json.dumps({"proof": [], "leaf": "00"}))

        result = _invoke(runner, sample_config_path, 'verify', str(proof_path))

        assert result.exit_code == 1
        assert 'No root given' in result.output


class TestBenchCommand:

    def test_bench(self, runner, sample_config_path):
        result = _invoke(runner, sample_config_path, 'bench', '--depth', '3', '--iterations', '2')

        assert result.exit_code == 0
        for operation in ('construct', 'update', 'proof', 'verify'):
            assert operation in result.stdout

    def test_bench_uses_configured_defaults(self, runner, sample_config_path):
        result = _invoke(runner, sample_config_path, 'bench')

        assert result.exit_code == 0
        assert 'construct' in result.stdout

    def test_bench_rejects_large_depth(self, runner, sample_config_path):
        result = _invoke(runner, sample_config_path, 'bench', '--depth', '31')

        assert result.exit_code != 0
