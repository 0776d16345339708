import math

from cowork.common.models import Listing, LocationQuery


def test_from_mapping_coerces_blank_and_numeric_fields():
    listing = Listing.from_mapping(
        {
            "name": "Hub",
            "address": "1 Main St",
            "city": "Austin",
            "state": "",
            "latitude": "30.26",
            "longitude": float("nan"),
            "rating": "n/a",
            "reviews": "12.0",
            "row_number": 4,
        }
    )

    assert listing.state is None
    assert listing.latitude == 30.26
    assert listing.longitude is None
    assert listing.rating is None
    assert listing.reviews == 12
    assert listing.row_number == 4
    assert listing.country == ""
    assert not listing.has_coordinates


def test_from_mapping_keeps_unknown_columns_in_source_order():
    row = {"position": "1", "name": "Hub", "data_cid": "99", "address": "x", "city": "c", "country": "k"}

    listing = Listing.from_mapping(row)

    assert listing.extra == {"position": "1", "data_cid": "99"}
    assert list(listing.to_dict()) == list(row)
    assert listing.to_dict()["data_cid"] == "99"


def test_extra_columns_do_not_affect_equality():
    first = Listing.from_mapping({"name": "Hub", "address": "x", "city": "c", "country": "k", "position": "1"})
    second = Listing(name="Hub", address="x", city="c", country="k")

    assert first == second


def test_zero_coordinates_are_present():
    listing = Listing(name="a", address="b", city="c", country="d", latitude=0.0, longitude=0.0)

    assert listing.has_coordinates
    assert not math.isnan(listing.latitude)


def test_location_query_defaults_search_query():
    payload = LocationQuery(city="Austin", state="TX", country="United States").to_payload()

    assert payload["search_query"] == "coworking space in Austin, TX"
    assert payload["region"] == ""
