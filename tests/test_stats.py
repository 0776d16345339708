from cowork.processing.stats import calculate_dashboard_stats


def test_empty_snapshot_has_zero_stats():
    stats = calculate_dashboard_stats([])

    assert stats.total_spaces == 0
    assert stats.total_cities == 0
    assert stats.total_countries == 0
    assert stats.average_rating == 0
    assert stats.spaces_with_high_rating == 0
    assert stats.spaces_currently_open == 0
    assert stats.wheelchair_accessible == 0
    assert stats.women_owned == 0
    assert stats.lgbtq_friendly == 0
    assert stats.top_cities == []
    assert stats.country_distribution == []


def test_average_rating_ignores_unrated_listings(make_listing):
    listings = [
        make_listing(rating=4.0),
        make_listing(rating=4.4),
        make_listing(rating=0),
        make_listing(rating=None),
    ]

    stats = calculate_dashboard_stats(listings)

    assert stats.average_rating == 4.2
    assert stats.spaces_with_high_rating == 2


def test_keyword_predicates_are_case_insensitive_and_tolerate_missing(make_listing):
    listings = [
        make_listing(open_state="Open now", accessibility_features="Wheelchair-accessible entrance"),
        make_listing(open_state="Closed", from_business="Identifies as women-owned"),
        make_listing(amenities="LGBTQ+ friendly, Women-Owned"),
        make_listing(from_business="lgbtq+ friendly"),
        make_listing(),
    ]

    stats = calculate_dashboard_stats(listings)

    assert stats.spaces_currently_open == 1
    assert stats.wheelchair_accessible == 1
    assert stats.women_owned == 2
    assert stats.lgbtq_friendly == 2


def test_open_keyword_matches_substring(make_listing):
    # "Opens 9AM" contains "open" and counts.
    stats = calculate_dashboard_stats([make_listing(open_state="Closed - Opens 9AM")])

    assert stats.spaces_currently_open == 1


def test_city_counts_are_case_sensitive(make_listing):
    listings = [make_listing(city="NYC"), make_listing(city="nyc")]

    stats = calculate_dashboard_stats(listings)

    assert stats.total_cities == 2
    assert stats.total_countries == 1


def test_top_cities_truncated_and_country_distribution(make_listing):
    listings = []
    for index in range(12):
        listings.extend(make_listing(city=f"City {index}") for _ in range(index + 1))
    listings.append(make_listing(city="Rome", state=None, country="Italy"))

    stats = calculate_dashboard_stats(listings)

    assert len(stats.top_cities) == 10
    assert stats.top_cities[0].city == "City 11"
    assert stats.top_cities[0].count == 12
    assert [(c.country, c.count) for c in stats.country_distribution] == [
        ("United States", 78),
        ("Italy", 1),
    ]


def test_average_rating_rounds_ties_up(make_listing):
    stats = calculate_dashboard_stats([make_listing(rating=4.0), make_listing(rating=4.5)])

    assert stats.average_rating == 4.3
