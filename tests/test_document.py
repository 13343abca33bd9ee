"""Document saves: PUT vs POST and lazy id binding."""

import asyncio

import pytest

from cblite.errors import ConflictError, InvalidNameError, InvalidPayloadKind
from cblite.models import SaveResult
from tests.conftest import AUTHORIZATION, DB_NAME, REST_URL

REV1 = "1-4101356e9c47d15d4f8f7390d05dbbcf"
REV2 = "1-5101356e9c47d15d4f8f7390d05dbbcf"
SERVER_ID = "209BB170-C1E0-473E-B3C4-A4533ACA3CDD"


class TestInvalidContent:
    def test_rejected_synchronously(self, cblite) -> None:
        document = cblite.database(DB_NAME).document("document")

        with pytest.raises(InvalidPayloadKind, match="You can't save this type: undefined"):
            document.save()
        with pytest.raises(InvalidPayloadKind, match="You can't save a null document"):
            document.save(None)
        with pytest.raises(InvalidPayloadKind, match="You can't save this type: int"):
            document.save(15)
        with pytest.raises(InvalidPayloadKind, match="You can't save this type: bool"):
            document.save(True)
        with pytest.raises(InvalidPayloadKind, match="You can't save this type: function"):
            document.save(lambda: None)

    def test_nothing_sent(self, cblite, transport) -> None:
        with pytest.raises(InvalidPayloadKind):
            cblite.database(DB_NAME).document().save("not a document")
        assert transport.requests == []


@pytest.mark.asyncio
async def test_save_with_explicit_id(cblite, transport):
    content = {"foo": "bar"}
    response = {"id": "document", "rev": REV1, "ok": True}
    transport.expect("PUT", f"{REST_URL}/{DB_NAME}/document", content, status=201, response=response)

    result = await cblite.database(DB_NAME).document("document").save(content)

    assert result == SaveResult(id="document", rev=REV1, ok=True)
    assert transport.requests[0].headers == {"Authorization": AUTHORIZATION}


@pytest.mark.asyncio
async def test_save_with_id_extracted_from_document(cblite, transport):
    content = {"_id": "document", "foo": "bar"}
    response = {"id": "document", "rev": REV1, "ok": True}
    transport.expect("PUT", f"{REST_URL}/{DB_NAME}/document", content, status=201, response=response)

    document = cblite.database(DB_NAME).document()
    result = await document.save(content)

    assert result.id == "document"
    assert document.id == "document"


@pytest.mark.asyncio
async def test_save_without_id_then_reuse_server_id(cblite, transport):
    content1 = {"foo": "bar"}
    content2 = {"foo": "bar", "bar": "baz"}
    transport.expect(
        "POST",
        f"{REST_URL}/{DB_NAME}",
        content1,
        status=201,
        response={"id": SERVER_ID, "rev": REV1, "ok": True},
    )
    transport.expect(
        "PUT",
        f"{REST_URL}/{DB_NAME}/{SERVER_ID}",
        content2,
        status=201,
        response={"id": SERVER_ID, "rev": REV2, "ok": True},
    )

    document = cblite.database(DB_NAME).document()
    first = await document.save(content1)
    assert first.rev == REV1
    assert document.id == SERVER_ID

    second = await document.save(content2)
    assert second.rev == REV2
    assert [r.method for r in transport.requests] == ["POST", "PUT"]


@pytest.mark.asyncio
async def test_explicit_id_never_changes(cblite, transport):
    transport.expect(
        "PUT", f"{REST_URL}/{DB_NAME}/document", status=201, response={"id": "document", "rev": REV1}
    )
    transport.expect(
        "PUT", f"{REST_URL}/{DB_NAME}/document", status=201, response={"id": "document", "rev": REV2}
    )

    document = cblite.database(DB_NAME).document("document")
    await document.save({"foo": "bar"})
    await document.save({"_id": "something-else", "foo": "baz"})

    assert document.id == "document"


@pytest.mark.asyncio
async def test_failed_post_leaves_handle_unbound(cblite, transport):
    transport.expect("POST", f"{REST_URL}/{DB_NAME}", status=409, response={"error": "conflict"})
    transport.expect(
        "POST", f"{REST_URL}/{DB_NAME}", status=201, response={"id": SERVER_ID, "rev": REV1}
    )

    document = cblite.database(DB_NAME).document()
    with pytest.raises(ConflictError) as exc:
        await document.save({"foo": "bar"})
    assert exc.value.body == {"error": "conflict"}
    assert document.id is None

    await document.save({"foo": "bar"})
    assert document.id == SERVER_ID


@pytest.mark.asyncio
async def test_overlapping_saves_are_serialized(cblite, transport):
    release = asyncio.Event()
    transport.expect(
        "POST",
        f"{REST_URL}/{DB_NAME}",
        status=201,
        response={"id": SERVER_ID, "rev": REV1},
        release=release,
    )
    transport.expect(
        "PUT", f"{REST_URL}/{DB_NAME}/{SERVER_ID}", status=201, response={"id": SERVER_ID, "rev": REV2}
    )

    await cblite.ready()
    document = cblite.database(DB_NAME).document()
    first = asyncio.ensure_future(document.save({"n": 1}))
    second = asyncio.ensure_future(document.save({"n": 2}))
    for _ in range(10):
        await asyncio.sleep(0)
    assert len(transport.requests) == 1

    release.set()
    await asyncio.gather(first, second)

    assert [r.method for r in transport.requests] == ["POST", "PUT"]
    assert document.id == SERVER_ID


@pytest.mark.asyncio
async def test_fetch(cblite, transport):
    stored = {"_id": "document", "_rev": REV1, "foo": "bar"}
    transport.expect("GET", f"{REST_URL}/{DB_NAME}/document", response=stored)

    assert await cblite.database(DB_NAME).document("document").fetch() == stored


@pytest.mark.asyncio
async def test_fetch_unbound(cblite):
    with pytest.raises(InvalidNameError):
        await cblite.database(DB_NAME).document().fetch()
