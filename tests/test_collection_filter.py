import pytest
from pydantic import ValidationError

from airbnb_explorer.collection import ListingCollection
from airbnb_explorer.criteria import FilterCriteria


def _ids(collection):
    return [item["id"] for item in collection.get_data()]


def _is_subsequence(sub, seq):
    it = iter(seq)
    return all(any(x is y for y in it) for x in sub)


def test_price_is_an_inclusive_upper_bound():
    collection = ListingCollection.from_records(
        [{"price": "$100.00", "bedrooms": "2"}, {"price": "$200.00", "bedrooms": "2"}]
    )
    filtered = collection.filter({"price": 150})
    assert [dict(item) for item in filtered.get_data()] == [{"price": "$100.00", "bedrooms": "2"}]
    assert len(collection.filter({"price": 200})) == 2


def test_filter_sample_by_price(sample_collection):
    assert _ids(sample_collection.filter({"price": 100})) == ["1", "3", "5", "7"]


def test_filter_bedrooms_exact_match(sample_collection):
    assert _ids(sample_collection.filter({"bedrooms": 1})) == ["1", "3"]
    assert _ids(sample_collection.filter({"bedrooms": 0})) == ["7"]


def test_filter_rating_lower_bound_drops_unparsable(sample_collection):
    assert _ids(sample_collection.filter({"review_scores_rating": 4.5})) == ["1", "2", "3", "5"]


def test_constraints_combine_with_and(sample_collection):
    criteria = FilterCriteria(price=100, bedrooms=1, review_scores_rating=4.9)
    assert _ids(sample_collection.filter(criteria)) == ["3"]


def test_missing_fields_fail_present_constraints():
    collection = ListingCollection.from_records([{"id": "x"}, {"id": "y", "price": "$10"}])
    assert _ids(collection.filter({"price": 50})) == ["y"]
    assert _ids(collection.filter({"bedrooms": 1})) == []
    assert _ids(collection.filter({"review_scores_rating": 0})) == []


def test_empty_criteria_is_a_no_op(sample_collection):
    assert sample_collection.filter({}).get_data() == sample_collection.get_data()
    assert sample_collection.filter().get_data() == sample_collection.get_data()


def test_filter_result_is_ordered_subsequence(sample_collection):
    narrowed = sample_collection.filter({"price": 500})
    further = narrowed.filter({"review_scores_rating": 4.5})
    assert _is_subsequence(narrowed.get_data(), sample_collection.get_data())
    assert _is_subsequence(further.get_data(), narrowed.get_data())


def test_filter_does_not_touch_receiver(sample_collection):
    before = sample_collection.get_data()
    sample_collection.filter({"price": 50})
    assert sample_collection.get_data() is before
    assert len(sample_collection) == 7


def test_chained_filters_share_original(sample_collection):
    chained = sample_collection.filter({"price": 500}).filter({"bedrooms": 1})
    assert chained.original is sample_collection.original
    assert _ids(chained) == ["1", "3"]


def test_reset_returns_to_first_loaded_dataset(sample_collection):
    chained = sample_collection.filter({"price": 500}).filter({"bedrooms": 1})
    reset = chained.reset_filters()
    assert reset.get_data() == sample_collection.original
    assert reset.get_data() != chained.get_data()
    assert not reset.is_filtered
    assert chained.is_filtered


def test_branching_from_same_base(sample_collection):
    cheap = sample_collection.filter({"price": 90})
    rated = sample_collection.filter({"review_scores_rating": 4.8})
    assert _ids(cheap) == ["3", "5", "7"]
    assert _ids(rated) == ["1", "3", "5"]
    assert _ids(cheap.reset_filters()) == _ids(rated.reset_filters())


def test_records_are_read_only(sample_collection):
    item = sample_collection.get_data()[0]
    with pytest.raises(TypeError):
        item["price"] = "$1"


def test_from_records_copies_input():
    raw = [{"id": "1", "price": "$5"}]
    collection = ListingCollection.from_records(raw)
    raw[0]["price"] = "$500"
    raw.append({"id": "2"})
    assert collection.get_data()[0]["price"] == "$5"
    assert len(collection) == 1


def test_wrong_criteria_shape_is_a_programming_error(sample_collection):
    with pytest.raises(ValidationError):
        sample_collection.filter({"max_price": 10})


def test_direct_construction_requires_tuples():
    with pytest.raises(TypeError):
        ListingCollection(original=[{"id": "1"}])


def test_direct_construction_rejects_foreign_current():
    base = ListingCollection.from_records([{"id": "1"}, {"id": "2"}])
    other = ListingCollection.from_records([{"id": "1"}])
    with pytest.raises(ValueError):
        ListingCollection(original=base.original, current=other.original)
    with pytest.raises(ValueError):
        ListingCollection(original=base.original, current=tuple(reversed(base.original)))
    kept = ListingCollection(original=base.original, current=base.original[1:])
    assert [item["id"] for item in kept.get_data()] == ["2"]


def test_collections_compare_by_value_but_are_unhashable(sample_collection):
    assert sample_collection.filter({"price": 100}) == sample_collection.filter({"price": 100})
    with pytest.raises(TypeError):
        hash(sample_collection)
