from cowork.processing.grouping import group_by, group_by_city, group_by_country


def test_group_by_keeps_first_seen_key_order():
    grouped = group_by(["b1", "a1", "b2", "c1", "a2"], lambda value: value[0])

    assert list(grouped) == ["b", "a", "c"]
    assert grouped["a"] == ["a1", "a2"]


def test_group_by_city_counts_cover_every_listing(make_listing):
    listings = [
        make_listing(city="Austin"),
        make_listing(city="Dallas"),
        make_listing(city="Austin"),
        make_listing(city="Lyon", state=None, country="France"),
    ]

    groups = group_by_city(listings)

    assert sum(group.total_spaces for group in groups) == len(listings)
    members = [id(item) for group in groups for item in group.spaces]
    assert sorted(members) == sorted(id(item) for item in listings)
    assert groups[0].city == "Austin"
    assert groups[0].total_spaces == 2


def test_group_by_city_empty_input():
    assert group_by_city([]) == []


def test_group_by_city_merges_missing_state_and_keeps_original_value(make_listing):
    listings = [
        make_listing(city="Lyon", state=None, country="France"),
        make_listing(city="Lyon", state="", country="France"),
    ]

    groups = group_by_city(listings)

    assert len(groups) == 1
    assert groups[0].total_spaces == 2
    # Display fields come from the first member, unmodified.
    assert groups[0].state is None


def test_group_by_city_separates_same_city_in_different_states(make_listing):
    listings = [
        make_listing(city="Portland", state="OR"),
        make_listing(city="Portland", state="ME"),
    ]

    assert len(group_by_city(listings)) == 2


def test_group_by_country_nests_states_and_cities(make_listing):
    listings = [
        make_listing(city="Austin", state="TX"),
        make_listing(city="Austin", state="TX"),
        make_listing(city="Dallas", state="TX"),
        make_listing(city="Denver", state="CO"),
        make_listing(city="Berlin", state=None, country="Germany"),
    ]

    countries = group_by_country(listings)

    assert [country.country for country in countries] == ["United States", "Germany"]
    usa = countries[0]
    assert usa.total_spaces == 4
    assert usa.total_states == 2
    assert usa.total_cities == 3
    assert [state.state for state in usa.states] == ["TX", "CO"]
    assert usa.states[0].total_cities == 2
    assert usa.states[0].cities[0].city == "Austin"

    germany = countries[1]
    assert germany.states[0].state == "Unknown"
    assert germany.states[0].total_spaces == 1


def test_group_by_country_flattened_cities_match_direct_grouping(make_listing):
    listings = [
        make_listing(city="Austin", state="TX"),
        make_listing(city="Denver", state="CO"),
        make_listing(city="Denver", state="CO"),
        make_listing(city="Paris", state=None, country="France"),
    ]

    for country in group_by_country(listings):
        subset = [item for item in listings if item.country == country.country]
        nested_total = sum(city.total_spaces for state in country.states for city in state.cities)
        direct_total = sum(city.total_spaces for city in group_by_city(subset))
        assert nested_total == direct_total == country.total_spaces
        assert len(country.cities) == len(group_by_city(subset))
