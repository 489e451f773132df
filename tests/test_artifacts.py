"""
Tests for artifact models.
"""

import base64

from genstudio.artifacts import UploadedFile, VideoArtifact, inline_data_part


def test_inline_data_part():
    part = inline_data_part(b"\x89PNG", "image/png")

    assert part["inline_data"]["mime_type"] == "image/png"
    assert base64.b64decode(part["inline_data"]["data"]) == b"\x89PNG"


def test_is_image():
    assert UploadedFile(name="a.jpg", data=b"", mime_type="image/jpeg").is_image
    assert not UploadedFile(name="a.txt", data=b"", mime_type="text/plain").is_image


def test_video_artifact_defaults():
    artifact = VideoArtifact(
        ref="blob:genstudio/abc", content_type="video/mp4", source_uri="http://x/video"
    )

    assert artifact.format == "mp4"
    assert artifact.size == 0
