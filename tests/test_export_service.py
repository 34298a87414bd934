"""
ExportService tests: CSV layout, localization and escaping.
"""

import csv
import io

import pytest

from annotator.schemas import Image
from annotator.services import CommentService, ExportService


BOM = b"\xef\xbb\xbf"


def parse(content: bytes):
    return list(csv.reader(io.StringIO(content.decode("utf-8-sig"))))


@pytest.fixture
async def heron_image(store) -> Image:
    image = Image(
        id="img-1",
        file_name="heron.jpg",
        url="/uploads/1-2-heron.jpg",
        uploaded_by="Root",
        upload_time="2025/3/7 09:05:01",
    )
    await store.add_images([image])
    return image


@pytest.fixture
def comments(store) -> CommentService:
    return CommentService(store, enforce_single_comment=False)


@pytest.mark.unit
async def test_export_empty(store):
    export = await ExportService(store, locale="zh").export_csv()

    assert export.filename == "comments.csv"
    assert export.content.startswith(BOM)
    assert parse(export.content) == [["图片文件名", "用户ID", "用户姓名", "用户角色", "回复内容", "时间"]]


@pytest.mark.unit
async def test_header_unquoted_rows_quoted(store, heron_image, comments):
    await comments.submit("img-1", "a001", "Alice", "user", "nice")

    lines = (await ExportService(store, locale="zh").export_csv()).content.decode("utf-8-sig").split("\n")

    assert lines[0] == "图片文件名,用户ID,用户姓名,用户角色,回复内容,时间"
    assert lines[1].startswith('"heron.jpg","a001","Alice","志愿者","nice",')


@pytest.mark.unit
async def test_export_row_for_known_image(store, heron_image, comments):
    admin_comment = await comments.submit("img-1", "root", "Root", "admin", "a grey heron")
    await comments.submit("img-1", "a001", "Alice", "user", "agreed")

    rows = parse((await ExportService(store, locale="zh").export_csv()).content)

    assert rows[1] == ["heron.jpg", "root", "Root", "管理者", "a grey heron", admin_comment.timestamp]
    assert rows[2][0] == "heron.jpg"
    assert rows[2][3] == "志愿者"


@pytest.mark.unit
async def test_export_unknown_image_placeholder(store, comments):
    await comments.submit("missing", "a001", "Alice", None, "where is it?")

    rows = parse((await ExportService(store, locale="zh").export_csv()).content)

    assert rows[1][0] == "未知"
    assert rows[1][3] == "志愿者"


@pytest.mark.unit
async def test_export_quotes_every_field(store, heron_image, comments):
    await comments.submit("img-1", "a001", "Alice", "user", 'she said "wow", twice')

    export = await ExportService(store, locale="zh").export_csv()
    text = export.content.decode("utf-8-sig")
    lines = text.split("\n")

    assert lines[1].startswith('"heron.jpg","a001","Alice","志愿者",')
    assert '"she said ""wow"", twice"' in lines[1]
    assert parse(export.content)[1][4] == 'she said "wow", twice'


@pytest.mark.unit
async def test_export_english_labels(store, heron_image, comments):
    await comments.submit("img-1", "root", "Root", "admin", "hello")
    await comments.submit("nope", "a001", "Alice", "user", "hi")

    rows = parse((await ExportService(store, locale="en").export_csv()).content)

    assert rows[0] == ["Image file name", "User ID", "User name", "User role", "Comment", "Time"]
    assert rows[1][3] == "admin"
    assert rows[2][0] == "unknown"
    assert rows[2][3] == "volunteer"


@pytest.mark.unit
async def test_export_keeps_comment_order(store, heron_image, comments):
    for text in ("first", "second", "third"):
        await comments.submit("img-1", "a001", "Alice", "user", text)

    rows = parse((await ExportService(store, locale="zh").export_csv()).content)

    assert [row[4] for row in rows[1:]] == ["first", "second", "third"]
