from unittest.mock import MagicMock

import pytest

from family_tree.errors import MutationError
from family_tree.storage import (
    SupabaseImageStorage,
    image_extension,
    validate_file_size,
)


def test_image_extension():
    assert image_extension("Photo.JPEG") == ".jpeg"
    assert image_extension("scan.webp") == ".webp"
    assert image_extension("notes.txt") is None
    assert image_extension(None) is None


def test_validate_file_size():
    assert validate_file_size(10, max_size=100) == (True, None)
    assert validate_file_size(0, max_size=100)[0] is False
    assert validate_file_size(5 * 1024 * 1024 + 1)[1] == "Image too large (max 5MB)."


def test_supabase_upload_returns_public_url():
    client = MagicMock()
    bucket = client.storage.from_.return_value
    bucket.get_public_url.return_value = "https://proj.supabase.co/storage/v1/object/public/family-tree/x.png"

    url = SupabaseImageStorage(client, bucket="family-tree").upload_image(
        "user-1", "me.png", b"bytes", "image/png"
    )

    client.storage.from_.assert_called_with("family-tree")
    key, contents, options = bucket.upload.call_args.args
    assert key.startswith("users/user-1/profile-pictures/")
    assert key.endswith(".png")
    assert contents == b"bytes"
    assert options == {"content-type": "image/png"}
    assert url.endswith("x.png")


def test_supabase_upload_failure_is_mutation_error():
    client = MagicMock()
    client.storage.from_.return_value.upload.side_effect = RuntimeError("bucket missing")

    with pytest.raises(MutationError, match="Failed to upload profile picture"):
        SupabaseImageStorage(client).upload_image("user-1", "me.png", b"bytes", "image/png")
