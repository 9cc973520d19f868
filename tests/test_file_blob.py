# Tests for file blobs
# Covers: encode_file (plain + encrypted), decode_to_path, category from suffix,
#         target path resolution

import base64
import os
from pathlib import Path

import pytest

from yor_vault.vault.encryption import AuthenticatedCipher
from yor_vault.vault.exceptions import CorruptRecord, UnsafeFileName
from yor_vault.vault.file_blob import (
    category_for_file,
    decode_to_path,
    encode_file,
    resolve_target_path,
)
from yor_vault.vault.typed_value import Category, Encrypted, ItemKind, Plaintext, TypedValue


@pytest.fixture
def binary_file(tmp_path):
    path = tmp_path / "photo.PNG"
    path.write_bytes(os.urandom(4096))
    return path


@pytest.fixture
def bare_file(tmp_path):
    path = tmp_path / "id_rsa"
    path.write_bytes(b"-----BEGIN KEY-----\n\x00\xff\n")
    return path


class TestEncodeFile:
    def test_plaintext_branch_is_base64(self, binary_file):
        value = encode_file(binary_file, "", ItemKind.IMAGE)
        assert isinstance(value.payload, Plaintext)
        assert base64.b64decode(value.payload.text) == binary_file.read_bytes()
        assert str(value.category) == "image/png"

    def test_encrypted_branch_seals_base64_text(self, binary_file):
        value = encode_file(binary_file, "pw", ItemKind.IMAGE)
        assert isinstance(value.payload, Encrypted)
        opened = AuthenticatedCipher.open(value.payload.blob, "pw")
        assert base64.b64decode(opened) == binary_file.read_bytes()

    def test_no_suffix_is_bin(self, bare_file):
        assert str(encode_file(bare_file).category) == "file/bin"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            encode_file(tmp_path / "nope.txt")

    def test_data_kind_rejected(self, binary_file):
        with pytest.raises(ValueError):
            encode_file(binary_file, "", ItemKind.DATA)

    def test_category_for_file(self):
        assert category_for_file("a/b/clip.MP4", ItemKind.VIDEO) == Category(ItemKind.VIDEO, "mp4")
        assert category_for_file("notes") == Category(ItemKind.FILE, "bin")


class TestDecodeToPath:
    def test_plaintext_roundtrip(self, binary_file, tmp_path):
        value = encode_file(binary_file, "", ItemKind.IMAGE)
        target = decode_to_path(value, tmp_path / "out" / "copy.png")
        assert target.read_bytes() == binary_file.read_bytes()

    def test_encrypted_roundtrip(self, bare_file, tmp_path):
        value = encode_file(bare_file, "secret")
        opened = AuthenticatedCipher.open(value.payload.blob, "secret")
        target = decode_to_path(value, tmp_path / "restored", opened)
        assert target.read_bytes() == bare_file.read_bytes()

    def test_encrypted_requires_opened_bytes(self, bare_file, tmp_path):
        value = encode_file(bare_file, "secret")
        with pytest.raises(ValueError):
            decode_to_path(value, tmp_path / "restored")

    def test_creates_parent_dirs(self, bare_file, tmp_path):
        value = encode_file(bare_file)
        target = decode_to_path(value, tmp_path / "a" / "b" / "c")
        assert target.exists()


class TestResolveTargetPath:
    def test_bin_uses_bare_key(self, tmp_path):
        path = resolve_target_path("ssh", Category(ItemKind.FILE, "bin"), tmp_path)
        assert path == tmp_path / "ssh"

    def test_extension_from_encoding(self, tmp_path):
        path = resolve_target_path("avatar", Category(ItemKind.IMAGE, "png"), tmp_path)
        assert path == tmp_path / "avatar.png"

    def test_out_file_wins(self, tmp_path):
        out = tmp_path / "elsewhere.png"
        path = resolve_target_path("avatar", Category(ItemKind.IMAGE, "png"), tmp_path / "files", out)
        assert path == out

    def test_out_directory_gets_default_name(self, tmp_path):
        out_dir = tmp_path / "downloads"
        out_dir.mkdir()
        path = resolve_target_path("avatar", Category(ItemKind.IMAGE, "png"), tmp_path, str(out_dir))
        assert path == Path(out_dir) / "avatar.png"

    @pytest.mark.parametrize("key", ["../escape", "a/b", "..", ""])
    def test_key_must_be_a_plain_file_name(self, tmp_path, key):
        with pytest.raises(UnsafeFileName):
            resolve_target_path(key, Category(ItemKind.FILE, "bin"), tmp_path)

    def test_encoding_cannot_escape(self, tmp_path):
        with pytest.raises(UnsafeFileName):
            resolve_target_path("k", Category(ItemKind.FILE, "/../../x"), tmp_path)

    def test_explicit_out_file_accepts_any_key(self, tmp_path):
        out = tmp_path / "chosen.bin"
        assert resolve_target_path("../escape", Category(ItemKind.FILE, "bin"), tmp_path, out) == out


class TestCorruptFileData:
    def test_invalid_base64(self, tmp_path):
        value = TypedValue(Plaintext("not base64!"), Category(ItemKind.FILE, "bin"))
        with pytest.raises(CorruptRecord):
            decode_to_path(value, tmp_path / "out")
        assert not (tmp_path / "out").exists()

    def test_non_ascii_text(self, tmp_path):
        value = TypedValue(Plaintext("ünïcode"), Category(ItemKind.FILE, "bin"))
        with pytest.raises(CorruptRecord):
            decode_to_path(value, tmp_path / "out")
