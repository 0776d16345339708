from datetime import datetime

from cowork.common.models import UploadMetadata
from cowork.ingest.store import ListingStore


def test_save_and_read_listings_upserts_by_place_id(tmp_path, make_listing):
    store = ListingStore(tmp_path / "store")

    written = store.save_listings(
        [
            make_listing(place_id="a", city="Austin", rating=4.5, latitude=30.2, longitude=-97.7),
            make_listing(place_id="b", city="Lyon", state=None, country="France"),
            make_listing(place_id=None),
        ],
        upload_id="u1",
    )
    store.save_listings([make_listing(place_id="a", name="Renamed", city="Austin")], upload_id="u2")

    listings = {item.place_id: item for item in store.all_listings()}

    assert written == 2
    assert set(listings) == {"a", "b"}
    assert listings["a"].name == "Renamed"
    assert listings["b"].state is None
    assert listings["b"].rating is None
    assert [item.place_id for item in store.listings_by_country("France")] == ["b"]
    assert [item.place_id for item in store.listings_by_city("Austin")] == ["a"]


def test_uploads_track_latest(tmp_path):
    store = ListingStore(tmp_path)
    assert store.latest_upload() is None

    store.save_upload(UploadMetadata(id="1", filename="a.csv", timestamp=datetime(2024, 1, 1), record_count=3, processing_time=0.5))
    store.save_upload(UploadMetadata(id="2", filename="b.csv", timestamp=datetime(2024, 2, 1), record_count=5, processing_time=1.0))

    latest = store.latest_upload()
    assert latest.id == "2"
    assert latest.record_count == 5
    assert [upload.id for upload in store.all_uploads()] == ["1", "2"]


def test_clear_removes_everything(tmp_path, make_listing):
    store = ListingStore(tmp_path)
    store.save_listings([make_listing(place_id="a")], upload_id="u1")

    store.clear()

    assert store.all_listings() == []
    assert store.all_uploads() == []
