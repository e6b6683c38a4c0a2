from datetime import timedelta

import pytest

from linkgate.core.errors import LinkExhausted, LinkExpired, LinkNotFound, SignerError
from linkgate.core.time import utcnow
from linkgate.services import link_service, link_store, redemption_service


def test_scenario_two_downloads_then_exhausted(db, settings, signer):
    created = link_service.create_link(
        db, settings, object_key="reports/q1.pdf", expires_in_seconds=3600, max_downloads=2
    )
    link_id = created.link.id

    first = redemption_service.redeem(db, signer, settings, link_id)
    assert first.downloads_served == 1
    assert link_store.get(db, link_id).downloads_served == 1

    second = redemption_service.redeem(db, signer, settings, link_id)
    assert second.downloads_served == 2
    assert link_store.get(db, link_id).downloads_served == 2

    with pytest.raises(LinkExhausted):
        redemption_service.redeem(db, signer, settings, link_id)
    assert len(signer.calls) == 2


def test_signer_gets_default_bucket_and_filename(db, settings, signer):
    created = link_service.create_link(db, settings, object_key="a/b.bin", download_filename="b.bin")
    download = redemption_service.redeem(db, signer, settings, created.link.id)

    assert signer.calls == [("files", "a/b.bin", 300, "b.bin")]
    assert download.url == "https://files.storage.example.com/a/b.bin?ttl=300"
    assert download.expires_in == 300


def test_bucket_override_is_signed(db, settings, signer):
    created = link_service.create_link(db, settings, object_key="x", bucket="private")
    redemption_service.redeem(db, signer, settings, created.link.id)
    assert signer.calls[0][0] == "private"


def test_signed_url_never_outlives_link(db, settings, signer):
    now = utcnow()
    created = link_service.create_link(db, settings, object_key="x", expires_in_seconds=100, now=now)
    download = redemption_service.redeem(db, signer, settings, created.link.id, now=now + timedelta(seconds=40))
    assert download.expires_in == 60


def test_scenario_expired_after_two_seconds(db, settings, signer):
    now = utcnow()
    created = link_service.create_link(db, settings, object_key="x", expires_in_seconds=1, now=now)
    with pytest.raises(LinkExpired):
        redemption_service.redeem(db, signer, settings, created.link.id, now=now + timedelta(seconds=2))
    assert signer.calls == []


def test_unknown_link(db, settings, signer):
    with pytest.raises(LinkNotFound):
        redemption_service.redeem(db, signer, settings, "does-not-exist")


def test_deleted_link_is_not_found(db, settings, signer):
    created = link_service.create_link(db, settings, object_key="x")
    link_service.delete_link(db, created.link.id)
    with pytest.raises(LinkNotFound):
        redemption_service.redeem(db, signer, settings, created.link.id)


def test_signer_failure_keeps_slot_by_default(db, settings, signer):
    created = link_service.create_link(db, settings, object_key="x", max_downloads=1)
    signer.fail = True

    with pytest.raises(SignerError) as exc:
        redemption_service.redeem(db, signer, settings, created.link.id)
    assert exc.value.retryable
    assert link_store.get(db, created.link.id).downloads_served == 1

    signer.fail = False
    with pytest.raises(LinkExhausted):
        redemption_service.redeem(db, signer, settings, created.link.id)


def test_signer_failure_releases_slot_when_configured(db, settings, signer):
    settings = settings.model_copy(update={"release_on_signer_failure": True})
    created = link_service.create_link(db, settings, object_key="x", max_downloads=1)
    signer.fail = True

    with pytest.raises(SignerError):
        redemption_service.redeem(db, signer, settings, created.link.id)
    assert link_store.get(db, created.link.id).downloads_served == 0

    signer.fail = False
    assert redemption_service.redeem(db, signer, settings, created.link.id).downloads_served == 1


def test_unexpected_signer_exception_becomes_signer_error(db, settings):
    class BrokenSigner:
        def sign(self, bucket, object_key, ttl, filename=None):
            raise TimeoutError("provider timed out")

    created = link_service.create_link(db, settings, object_key="x")
    with pytest.raises(SignerError):
        redemption_service.redeem(db, BrokenSigner(), settings, created.link.id)
    assert link_store.get(db, created.link.id).downloads_served == 1
