"""Tests for placeholder to field matching."""

import pytest

from resumebind.fields import DataField, default_resume_fields
from resumebind.matching import BindingMatcher, PlaceholderMatch, string_similarity


class TestStringSimilarity:
    """Test the lexical similarity measure."""

    def test_identical_strings(self):
        """Test equal strings score 1.0 regardless of case."""
        assert string_similarity("email", "email") == 1.0
        assert string_similarity("Email", "eMAIL") == 1.0

    def test_empty_strings(self):
        """Test empty string boundaries."""
        assert string_similarity("", "") == 1.0
        assert string_similarity("", "email") == 0.0
        assert string_similarity("email", "") == 0.0

    def test_disjoint_strings(self):
        """Test strings sharing no characters score 0.0."""
        assert string_similarity("abc", "xyz") == 0.0

    def test_partial_match(self):
        """Test the 2m/(l1+l2) formula on a simple pair."""
        assert string_similarity("abc", "abd") == pytest.approx(2 / 3)
        assert string_similarity("emails", "email") == pytest.approx(10 / 11)

    @pytest.mark.parametrize(
        "first,second",
        [
            ("workExperience", "workExpertise"),
            ("job title", "workExperience"),
            ("mail", "emailAddress"),
            ("phone", "Phone number"),
        ],
    )
    def test_symmetric_and_bounded(self, first, second):
        """Test the score is symmetric and within [0, 1]."""
        score = string_similarity(first, second)

        assert score == string_similarity(second, first)
        assert 0.0 <= score <= 1.0


class TestBindingMatcher:
    """Test single placeholder matching."""

    def test_exact_match(self):
        """Test a placeholder naming a field path scores 1.0."""
        matcher = BindingMatcher([DataField(path="email", name="Email")])

        result = matcher.match("{{email}}")

        assert result is not None
        assert result.field == "email"
        assert result.score == 1.0

    def test_exact_match_ignores_case_and_grammar(self):
        """Test exact matching works across token grammars and case."""
        matcher = BindingMatcher([DataField(path="email", name="Email")])

        assert matcher.match("[[FIELD:EMAIL]]").score == 1.0
        assert matcher.match("{{ email }}").score == 1.0

    def test_exact_path_wins_over_equal_name(self):
        """Test the exact path shortcut beats an earlier equally named field."""
        matcher = BindingMatcher(
            [
                DataField(path="emails", name="email"),
                DataField(path="email", name="E-mail"),
            ]
        )

        assert matcher.match("{{email}}").field == "email"

    def test_below_threshold(self):
        """Test no suggestion when nothing reaches the threshold."""
        matcher = BindingMatcher([DataField(path="xyz", name="XYZ")])

        assert matcher.match("{{email}}") is None

    def test_configurable_threshold(self):
        """Test the threshold gate is configurable."""
        fields = [DataField(path="email", name="Email")]

        strict = BindingMatcher(fields, threshold=0.95)
        lenient = BindingMatcher(fields, threshold=0.4)

        assert strict.match("{{emails}}") is None
        assert lenient.match("{{emails}}").score == pytest.approx(10 / 11)

    def test_zero_threshold_always_matches(self):
        """Test a zero threshold returns the first field even at score 0."""
        matcher = BindingMatcher([DataField(path="xyz", name="XYZ")], threshold=0.0)

        result = matcher.match("{{abc}}")

        assert result is not None
        assert result.field == "xyz"
        assert result.score == 0.0

    def test_empty_catalog(self):
        """Test matching against no fields yields nothing."""
        matcher = BindingMatcher([])

        assert matcher.match("{{email}}") is None
        assert matcher.process_placeholders(["{{email}}", "{{phone}}"]) == []

    def test_description_is_weighted(self):
        """Test a description match is discounted."""
        matcher = BindingMatcher([DataField(path="a1", name="b2", description="telephone")])

        result = matcher.match("{{telephone}}")

        assert result.field == "a1"
        assert result.score == pytest.approx(0.7)

    def test_name_beats_equal_description(self):
        """Test a name match outranks the same text as a description."""
        matcher = BindingMatcher(
            [
                DataField(path="x", name="q", description="phone"),
                DataField(path="y", name="phone"),
            ]
        )

        assert matcher.match("{{phone}}").field == "y"

    def test_ties_keep_first_field(self):
        """Test equally scored fields resolve to catalog order."""
        matcher = BindingMatcher(
            [
                DataField(path="p1", name="city"),
                DataField(path="p2", name="city"),
            ]
        )

        result = matcher.match("{{city}}")

        assert result.field == "p1"
        assert result.score == 1.0

    def test_loop_prefers_collection(self):
        """Test iteration placeholders bind to collection fields."""
        fields = [
            DataField(path="workExpertise", name="Work Expertise"),
            DataField(path="workExperience[].jobTitle", name="Job Title"),
            DataField(path="workExperience[].employer", name="Employer"),
        ]
        matcher = BindingMatcher(fields)

        plain = matcher.match("{{workExperience}}")
        each = matcher.match("{{#each workExperience}}")
        loop = matcher.match("[[LOOP:workExperience]]")

        assert plain.field == "workExpertise"
        assert each.field == "workExperience[].jobTitle"
        assert each.score == 1.0
        assert loop.field == "workExperience[].jobTitle"

    def test_loop_word_in_placeholder(self):
        """Test 'each' or 'loop' in the placeholder text enables collection scoring."""
        matcher = BindingMatcher(
            [
                DataField(path="workExpertise", name="Work Expertise"),
                DataField(path="workExperience[].jobTitle", name="Job Title"),
            ]
        )

        assert matcher.match("{{loop workExperience}}").field == "workExperience[].jobTitle"
        assert matcher.match("{{workExperience}}").field == "workExpertise"

    def test_default_schema_matches(self):
        """Test matching against the built-in resume schema."""
        matcher = BindingMatcher(default_resume_fields())

        assert matcher.match("{{firstName}}").field == "firstName"
        assert matcher.match("[[FIELD:profession]]").field == "profession"
        assert matcher.match("{{#each education}}").field == "education"

        nested = matcher.match("{{workExperience.jobTitle}}")
        assert nested.field == "workExperience[].jobTitle"
        assert nested.score > 0.9

    def test_scores_are_bounded(self):
        """Test every score stays within [0, 1] and above the threshold."""
        matcher = BindingMatcher(default_resume_fields())
        tokens = [
            "{{firstName}}",
            "{{surname}}",
            "{{jobTitle}}",
            "{{#each workExperience}}",
            "[[LOOP:education]]",
            "[[IF:photo]]",
            "{{phoneNumber}}",
            "{{zzz}}",
        ]

        for token in tokens:
            result = matcher.match(token)
            if result is not None:
                assert matcher.threshold <= result.score <= 1.0

    def test_catalog_qualification(self):
        """Test the catalog honours the path qualification flag."""
        fields = [
            DataField(
                path="workExperience",
                name="Work Experience",
                kind="array",
                children=[DataField(path="jobTitle", name="Job Title")],
            )
        ]

        plain = BindingMatcher(fields, qualify_paths=False)
        qualified = BindingMatcher(fields, qualify_paths=True)

        assert plain.get_entry("jobTitle") is not None
        assert qualified.get_entry("jobTitle") is None
        assert qualified.get_entry("workExperience[].jobTitle") is not None


class TestProcessPlaceholders:
    """Test batch matching."""

    def test_input_order_preserved(self):
        """Test results follow the input order."""
        matcher = BindingMatcher(
            [DataField(path="email", name="Email"), DataField(path="phone", name="Phone")]
        )

        results = matcher.process_placeholders(["{{phone}}", "{{email}}"])

        assert [r.placeholder for r in results] == ["{{phone}}", "{{email}}"]
        assert [r.field for r in results] == ["phone", "email"]

    def test_unmatched_are_omitted(self):
        """Test placeholders without a suggestion are left out."""
        matcher = BindingMatcher([DataField(path="email", name="Email")])

        results = matcher.process_placeholders(["{{email}}", "{{zzz}}"])

        assert results == [PlaceholderMatch(placeholder="{{email}}", field="email", confidence=1.0)]


class TestRank:
    """Test ranked candidates."""

    def test_exact_match_alone(self):
        """Test an exact path match is the only candidate."""
        matcher = BindingMatcher(default_resume_fields())

        candidates = matcher.rank("{{email}}")

        assert len(candidates) == 1
        assert candidates[0].field == "email"
        assert candidates[0].confidence == 1.0
        assert candidates[0].reasoning.startswith("Perfect match")

    def test_ordered_and_limited(self):
        """Test candidates are sorted, gated and limited."""
        matcher = BindingMatcher(
            [
                DataField(path="emailAddress", name="Email Address"),
                DataField(path="email", name="Email"),
                DataField(path="xyz", name="XYZ"),
            ]
        )

        candidates = matcher.rank("{{mail}}")

        assert [c.field for c in candidates] == ["email", "emailAddress"]
        assert candidates[0].confidence == pytest.approx(8 / 9)
        assert candidates[1].confidence == pytest.approx(0.5)

        assert [c.field for c in matcher.rank("{{mail}}", limit=1)] == ["email"]

    def test_no_candidates(self):
        """Test no candidates below the threshold."""
        matcher = BindingMatcher([DataField(path="xyz", name="XYZ")])

        assert matcher.rank("{{email}}") == []
