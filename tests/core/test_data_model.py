# tests/core/test_data_model.py
import numpy as np
import pytest

from Cardiopy.core.data_model import Annotation, AnnotationSet, LayoutEntry, LeadSignal, Sample


@pytest.fixture
def five_sample_lead():
    return LeadSignal([0.0, 1.0, 2.0, 3.0, 4.0], [10.0, 11.0, 12.0, 13.0, 14.0])


# --- LayoutEntry ---

@pytest.mark.parametrize("x, y, ignored", [
    (0, 0, False),
    (3, 7, False),
    (-1, 0, True),
    (0, -1, True),
    (-1, -1, True),
])
def test_layout_entry_sentinel(x, y, ignored):
    assert LayoutEntry(x, y).is_ignored is ignored


# --- LeadSignal construction ---

def test_lead_signal_empty():
    lead = LeadSignal()
    assert lead.size() == 0
    assert len(lead) == 0
    assert lead.times.shape == (0,)
    assert not lead.is_bad()


def test_lead_signal_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        LeadSignal([0.0, 1.0], [1.0])


def test_append_grows_past_initial_capacity():
    lead = LeadSignal()
    for i in range(1000):
        lead.append(float(i), float(i) * 2)
    assert lead.size() == 1000
    assert lead.sample_at(999) == Sample(999.0, 1998.0)
    np.testing.assert_array_equal(lead.times[:3], [0.0, 1.0, 2.0])


def test_sample_access_and_mutation(five_sample_lead):
    assert five_sample_lead.sample_at(2) == Sample(2.0, 12.0)
    five_sample_lead.set_value_at(2, -5.0)
    assert five_sample_lead.sample_at(2).value == -5.0
    with pytest.raises(IndexError):
        five_sample_lead.sample_at(5)
    with pytest.raises(IndexError):
        five_sample_lead.set_value_at(-1, 0.0)


def test_times_view_is_read_only(five_sample_lead):
    with pytest.raises(ValueError):
        five_sample_lead.times[0] = 99.0


def test_values_view_writes_through(five_sample_lead):
    five_sample_lead.values[0] = 42.0
    assert five_sample_lead.sample_at(0).value == 42.0


def test_fresh_values_view_after_growth_writes_through():
    lead = LeadSignal([0.0], [1.0])
    for i in range(1, 300):
        lead.append(float(i), 1.0)
    lead.values[0] = 42.0
    assert lead.sample_at(0).value == 42.0


def test_bad_flag(five_sample_lead):
    five_sample_lead.set_bad(True)
    assert five_sample_lead.is_bad()
    five_sample_lead.set_bad(False)
    assert not five_sample_lead.is_bad()


# --- index_before ---

@pytest.mark.parametrize("t, expected", [
    (-1.0, -1),
    (0.0, -1),
    (0.5, 0),
    (2.0, 1),
    (4.0, 3),
    (100.0, 4),
])
def test_index_before_is_strict(five_sample_lead, t, expected):
    assert five_sample_lead.index_before(t) == expected


# --- subset / clone ---

def test_subset_includes_start_excludes_end(five_sample_lead):
    window = five_sample_lead.subset(1.0, 3.0)
    np.testing.assert_array_equal(window.times, [1.0, 2.0])
    np.testing.assert_array_equal(window.values, [11.0, 12.0])


def test_subset_boundaries_on_exact_sample_times(five_sample_lead):
    assert five_sample_lead.subset(0.0, 0.0).size() == 0
    assert five_sample_lead.subset(4.0, 5.0).size() == 1
    assert five_sample_lead.subset(0.0, 4.0).size() == 4


def test_subset_is_independent_and_keeps_bad_flag(five_sample_lead):
    five_sample_lead.set_bad(True)
    window = five_sample_lead.subset(0.0, 10.0)
    window.values[0] = -1.0
    assert five_sample_lead.sample_at(0).value == 10.0
    assert window.is_bad()


def test_clone_is_deep(five_sample_lead):
    copy = five_sample_lead.clone()
    copy.values[:] = 0.0
    copy.append(5.0, 15.0)
    assert five_sample_lead.size() == 5
    assert five_sample_lead.sample_at(1).value == 11.0


# --- baseline ---

def test_subtract_baseline_median_uses_upper_median():
    lead = LeadSignal([0, 1, 2, 3], [1.0, 2.0, 3.0, 4.0])
    assert lead.subtract_baseline_median() == 3.0
    np.testing.assert_array_equal(lead.values, [-2.0, -1.0, 0.0, 1.0])


def test_subtract_baseline_median_on_empty_lead():
    lead = LeadSignal()
    assert lead.subtract_baseline_median() == 0.0


def test_filters_on_empty_lead_are_noops():
    lead = LeadSignal()
    lead.sgolay_filter(25, 25, 6)
    lead.lowpass_filter(0.1)
    lead.detrend(2)
    lead.constant_offset_filter(1.0)
    assert lead.size() == 0


# --- Annotations ---

def test_annotation_str():
    assert str(Annotation(2, 1.5)) == "2 1.5"


def test_annotation_set_uniqueness_over_kind_and_time():
    annotations = AnnotationSet()
    annotations.add(1, 0.5)
    annotations.add(1, 0.5)
    annotations.add(2, 0.5)
    assert len(annotations) == 2
    assert Annotation(1, 0.5) in annotations
    assert Annotation(3, 0.5) not in annotations


def test_annotation_set_sorted_by_time_then_kind():
    annotations = AnnotationSet()
    annotations.add(3, 2.0)
    annotations.add(2, 1.0)
    annotations.add(1, 2.0)
    assert annotations.sorted() == [Annotation(2, 1.0), Annotation(1, 2.0), Annotation(3, 2.0)]
    assert list(annotations) == annotations.sorted()


def test_annotation_set_contains_time_matches_any_kind():
    annotations = AnnotationSet([Annotation(7, 1.25)])
    assert annotations.contains_time(1.25)
    assert not annotations.contains_time(1.0)


def test_annotation_set_copy_is_independent():
    annotations = AnnotationSet([Annotation(1, 0.0)])
    copy = annotations.copy()
    copy.add(2, 1.0)
    assert len(annotations) == 1
    assert copy != annotations
    copy.clear()
    assert len(copy) == 0
