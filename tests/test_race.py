"""Tests for the US Core race extension helpers."""

import copy
import logging

import pytest

from fhir_profiling.datatypes import Coding
from fhir_profiling.errors import DomainMappingError, InvalidArgumentError
from fhir_profiling.extensions import get_extension, get_extensions
from fhir_profiling.us_core import (
    CDC_REC_SYSTEM,
    NULL_FLAVOR_SYSTEM,
    RACE_EXTENSION_URL,
    OmbRaceCategory,
    add_race_omb_category,
    clear_race,
    get_race_detailed,
    get_race_omb_categories,
    set_race,
    set_race_text,
    try_get_race_text,
)

AIAN = OmbRaceCategory.AMERICAN_INDIAN_OR_ALASKA_NATIVE
ASIAN = OmbRaceCategory.ASIAN
WHITE = OmbRaceCategory.WHITE
UNK = OmbRaceCategory.UNKNOWN
ASKU = OmbRaceCategory.ASKED_BUT_NO_ANSWER


@pytest.fixture
def patient():
    return {"resourceType": "Patient", "id": "p1"}


def _omb_codes(patient):
    race = get_extension(patient, RACE_EXTENSION_URL)
    return [c.value.code for c in race.extension if c.url == "ombCategory"]


# ═══════════════════════════════════════════════════════════════════
# Coding table
# ═══════════════════════════════════════════════════════════════════


class TestCodingTable:
    @pytest.mark.parametrize("category, system, code, display", [
        (AIAN, CDC_REC_SYSTEM, "1002-5", "American Indian or Alaska Native"),
        (ASIAN, CDC_REC_SYSTEM, "2028-9", "Asian"),
        (OmbRaceCategory.BLACK_OR_AFRICAN_AMERICAN, CDC_REC_SYSTEM, "2054-5",
         "Black or African American"),
        (OmbRaceCategory.NATIVE_HAWAIIAN_OR_OTHER_PACIFIC_ISLANDER, CDC_REC_SYSTEM, "2076-8",
         "Native Hawaiian or Other Pacific Islander"),
        (WHITE, CDC_REC_SYSTEM, "2106-3", "White"),
        (UNK, NULL_FLAVOR_SYSTEM, "UNK", "Unknown"),
        (ASKU, NULL_FLAVOR_SYSTEM, "ASKU", "Asked but no answer"),
    ])
    def test_stored_coding(self, patient, category, system, code, display):
        set_race(patient, "text", [category])
        race = patient["extension"][0]
        assert race["extension"][1] == {
            "url": "ombCategory",
            "valueCoding": {"system": system, "code": code, "display": display},
        }

    @pytest.mark.parametrize("category", list(OmbRaceCategory))
    def test_round_trip(self, patient, category):
        set_race(patient, "text", [category])
        assert get_race_omb_categories(patient) == [category]


# ═══════════════════════════════════════════════════════════════════
# set_race
# ═══════════════════════════════════════════════════════════════════


class TestSetRace:
    def test_structure(self, patient):
        detailed = Coding(CDC_REC_SYSTEM, "1586-7", "Shoshone")
        set_race(patient, "Mixed", [AIAN, WHITE], [detailed])
        race = patient["extension"][0]
        assert race["url"] == RACE_EXTENSION_URL
        assert [c["url"] for c in race["extension"]] == [
            "text", "ombCategory", "ombCategory", "detailed",
        ]
        assert race["extension"][0] == {"url": "text", "valueString": "Mixed"}
        assert get_race_detailed(patient) == [detailed]

    def test_text_only(self, patient):
        set_race(patient, "Declined")
        assert try_get_race_text(patient) == ("Declined", True)
        assert get_race_omb_categories(patient) == []

    def test_replaces_existing(self, patient):
        set_race(patient, "first", [ASIAN])
        set_race(patient, "second", [WHITE])
        assert len(get_extensions(patient, RACE_EXTENSION_URL)) == 1
        assert try_get_race_text(patient) == ("second", True)
        assert get_race_omb_categories(patient) == [WHITE]

    def test_empty_text_rejected(self, patient):
        with pytest.raises(InvalidArgumentError):
            set_race(patient, "")
        with pytest.raises(InvalidArgumentError):
            set_race(patient, None)

    def test_unmapped_category_rejected_before_write(self, patient):
        set_race(patient, "keep", [ASIAN])
        with pytest.raises(DomainMappingError):
            set_race(patient, "new", [ASIAN, "White"])
        assert try_get_race_text(patient) == ("keep", True)

    def test_detailed_must_be_coding(self, patient):
        with pytest.raises(InvalidArgumentError):
            set_race(patient, "text", detailed=[{"system": "s", "code": "c"}])

    def test_none_patient(self):
        with pytest.raises(InvalidArgumentError):
            set_race(None, "text")


# ═══════════════════════════════════════════════════════════════════
# add_race_omb_category
# ═══════════════════════════════════════════════════════════════════


class TestAddOmbCategory:
    def test_creates_extension_with_placeholder_text(self, patient):
        add_race_omb_category(patient, ASIAN)
        assert try_get_race_text(patient) == ("Generated Text", True)
        assert get_race_omb_categories(patient) == [ASIAN]

    def test_placeholder_text_from_config(self, patient):
        add_race_omb_category(patient, ASIAN, config={"race_placeholder_text": "Auto"})
        assert try_get_race_text(patient) == ("Auto", True)

    def test_unknown_config_key(self, patient):
        with pytest.raises(InvalidArgumentError):
            add_race_omb_category(patient, ASIAN, config={"bogus": 1})

    def test_concrete_categories_accumulate(self, patient):
        add_race_omb_category(patient, ASIAN)
        add_race_omb_category(patient, WHITE)
        assert get_race_omb_categories(patient) == [ASIAN, WHITE]

    def test_duplicate_is_noop(self, patient):
        add_race_omb_category(patient, ASIAN)
        add_race_omb_category(patient, ASIAN)
        assert _omb_codes(patient) == ["2028-9"]

    def test_unknown_evicted_by_concrete(self, patient):
        add_race_omb_category(patient, UNK)
        add_race_omb_category(patient, AIAN)
        assert get_race_omb_categories(patient) == [AIAN]

    def test_asked_but_no_answer_evicted_by_concrete(self, patient):
        set_race(patient, "text", [ASKU])
        add_race_omb_category(patient, WHITE)
        assert get_race_omb_categories(patient) == [WHITE]

    def test_unknown_rejected_next_to_concrete(self, patient):
        add_race_omb_category(patient, AIAN)
        add_race_omb_category(patient, UNK)
        assert get_race_omb_categories(patient) == [AIAN]

    def test_placeholders_replace_each_other(self, patient):
        add_race_omb_category(patient, UNK)
        add_race_omb_category(patient, ASKU)
        assert get_race_omb_categories(patient) == [ASKU]

    def test_text_and_detailed_preserved(self, patient):
        detailed = Coding(CDC_REC_SYSTEM, "2029-7", "Asian Indian")
        set_race(patient, "Asian", [UNK], [detailed])
        add_race_omb_category(patient, ASIAN)
        assert try_get_race_text(patient) == ("Asian", True)
        assert get_race_detailed(patient) == [detailed]
        assert get_race_omb_categories(patient) == [ASIAN]

    def test_edits_existing_extension_in_place(self, patient):
        patient["extension"] = [{"url": "http://example.org/first", "valueCode": "x"}]
        set_race(patient, "text", [ASIAN])
        patient["extension"].append({"url": "http://example.org/last", "valueCode": "y"})
        add_race_omb_category(patient, WHITE)
        assert [e["url"] for e in patient["extension"]] == [
            "http://example.org/first", RACE_EXTENSION_URL, "http://example.org/last",
        ]

    def test_unmapped_category_raises(self, patient):
        with pytest.raises(DomainMappingError):
            add_race_omb_category(patient, "Asian")


class TestStoredCategoriesKept:
    """Categories already on the patient go back exactly as they were stored."""

    WHITE_NODE = {
        "url": "ombCategory",
        "valueCoding": {"system": CDC_REC_SYSTEM, "code": "2106-3", "display": "White"},
    }

    def _seed(self, patient, *nodes):
        patient["extension"] = [{
            "url": RACE_EXTENSION_URL,
            "extension": [{"url": "text", "valueString": "seeded"}, *nodes],
        }]

    def _children(self, patient):
        return patient["extension"][0]["extension"]

    def test_extra_coding_fields_kept(self, patient):
        asian = {
            "url": "ombCategory",
            "valueCoding": {
                "system": CDC_REC_SYSTEM,
                "code": "2028-9",
                "display": "Asian",
                "version": "1.2",
                "userSelected": True,
            },
            "extension": [{"url": "http://example.org/source", "valueString": "intake"}],
        }
        self._seed(patient, copy.deepcopy(asian))
        add_race_omb_category(patient, WHITE)
        assert self._children(patient)[1:] == [asian, self.WHITE_NODE]

    def test_coding_without_system_kept(self, patient):
        asian = {"url": "ombCategory", "valueCoding": {"code": "2028-9"}}
        self._seed(patient, copy.deepcopy(asian))
        add_race_omb_category(patient, WHITE)
        assert self._children(patient)[1:] == [asian, self.WHITE_NODE]

    def test_coding_without_code_kept(self, patient, caplog):
        codeless = {"url": "ombCategory", "valueCoding": {"system": CDC_REC_SYSTEM, "display": "?"}}
        self._seed(patient, copy.deepcopy(codeless))
        with caplog.at_level(logging.WARNING, logger="fhir_profiling.us_core._race"):
            add_race_omb_category(patient, WHITE)
        assert self._children(patient)[1:] == [codeless, self.WHITE_NODE]
        assert "without a code" in caplog.text

    def test_unknown_system_kept(self, patient):
        local = {"url": "ombCategory", "valueCoding": {"system": "http://example.org/race", "code": "L1"}}
        self._seed(patient, copy.deepcopy(local))
        add_race_omb_category(patient, WHITE)
        assert self._children(patient)[1:] == [local, self.WHITE_NODE]

    def test_other_children_untouched(self, patient):
        detailed = {"url": "detailed", "valueCoding": {"system": CDC_REC_SYSTEM, "code": "2029-7"}}
        self._seed(patient, copy.deepcopy(detailed))
        add_race_omb_category(patient, WHITE)
        assert self._children(patient) == [
            {"url": "text", "valueString": "seeded"}, detailed, self.WHITE_NODE,
        ]

    def test_placeholder_still_evicted(self, patient):
        unknown = {"url": "ombCategory", "valueCoding": {"system": NULL_FLAVOR_SYSTEM, "code": "UNK"}}
        self._seed(patient, unknown)
        add_race_omb_category(patient, WHITE)
        assert self._children(patient)[1:] == [self.WHITE_NODE]


# ═══════════════════════════════════════════════════════════════════
# Text / clear
# ═══════════════════════════════════════════════════════════════════


class TestRaceText:
    def test_set_text_creates_extension(self, patient):
        set_race_text(patient, "Unspecified")
        assert try_get_race_text(patient) == ("Unspecified", True)

    def test_set_text_replaces(self, patient):
        set_race(patient, "old", [WHITE])
        set_race_text(patient, "new")
        race = get_extension(patient, RACE_EXTENSION_URL)
        assert [c.url for c in race.extension].count("text") == 1
        assert try_get_race_text(patient) == ("new", True)
        assert get_race_omb_categories(patient) == [WHITE]

    def test_set_text_empty_rejected(self, patient):
        with pytest.raises(InvalidArgumentError):
            set_race_text(patient, "")

    def test_text_absent(self, patient):
        assert try_get_race_text(patient) == (None, False)
        patient["extension"] = [{"url": RACE_EXTENSION_URL, "extension": []}]
        assert try_get_race_text(patient) == (None, False)

    def test_clear(self, patient):
        set_race(patient, "text", [WHITE])
        clear_race(patient)
        assert get_extension(patient, RACE_EXTENSION_URL) is None
        assert get_race_omb_categories(patient) == []
