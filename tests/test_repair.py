"""Tests for the text repair passes."""

import pytest

from resume_extractor.extractor.repair import (
    clean_plain_text,
    collapse_digit_runs,
    collapse_letter_runs,
    final_cleanup,
    is_section_header,
    normalize_structure,
    reconstruct_emails,
    reconstruct_urls,
    remove_artifacts,
    repair,
)


class TestRemoveArtifacts:
    def test_bullets_are_normalised(self):
        assert remove_artifacts("● Led a team") == "• Led a team"
        assert remove_artifacts("\uf0b7 Led a team") == "• Led a team"

    def test_mojibake_bullet(self):
        assert remove_artifacts("â€¢ Python") == "• Python"

    def test_ampersand_becomes_and(self):
        assert remove_artifacts("Sales & Marketing") == "Sales  and  Marketing"

    def test_r_and_d_is_kept(self):
        assert remove_artifacts("R&D lead") == "R&D lead"

    def test_ligatures_and_zero_width(self):
        assert remove_artifacts("\ufb01nance of\u200bfice") == "finance office"

    def test_replacement_character_becomes_space(self):
        assert remove_artifacts("Python\ufffdGo") == "Python Go"


class TestSpacingRepair:
    def test_spaced_name(self):
        assert "JiwooLee" in repair("J i w o o L e e")

    def test_spaced_email(self):
        result = repair("j i w o o @ g m a i l . c o m")
        assert "jiwoo@gmail.com" in result

    def test_email_with_spaces_around_at(self):
        assert reconstruct_emails("jiwoo @ gmail.com") == "jiwoo@gmail.com"

    def test_at_without_domain_is_left_alone(self):
        assert reconstruct_emails("meet @ noon") == "meet @ noon"

    def test_spaced_domain(self):
        assert reconstruct_urls("g i t h u b . c o m") == "github.com"

    def test_dotted_gap(self):
        assert reconstruct_urls("visit github . com today") == "visit github.com today"

    def test_url_path(self):
        assert reconstruct_urls("linkedin.com / in / jiwoo") == "linkedin.com/in/jiwoo"

    def test_spaced_run_without_domain_is_left_for_letter_pass(self):
        assert reconstruct_urls("S k i l l s") == "S k i l l s"

    def test_letter_runs(self):
        assert collapse_letter_runs("P y t h o n developer") == "Python developer"

    def test_letter_runs_leave_words_alone(self):
        assert collapse_letter_runs("I am a developer") == "I am a developer"

    def test_digit_runs(self):
        assert collapse_digit_runs("since 2 0 1 9") == "since 2019"

    def test_uneven_blanks(self):
        assert repair("J  a  v  a") == "Java"

    def test_tabbed_letters(self):
        assert repair("Ratings\tA\tB") == "Ratings AB"


class TestStructure:
    @pytest.mark.parametrize(
        "line",
        ["Experience", "WORK EXPERIENCE", "Technical Skills:", "Education"],
    )
    def test_headers_detected(self, line):
        assert is_section_header(line)

    def test_plain_line_is_not_header(self):
        assert not is_section_header("Senior Software Engineer")

    def test_header_set_apart(self):
        text = "Jiwoo Lee\nExperience\nAcme Corp"
        assert normalize_structure(text) == "Jiwoo Lee\n\nExperience\n\nAcme Corp"

    def test_blank_lines_dropped(self):
        assert normalize_structure("  a  \n\n\n  b ") == "a\nb"

    def test_spaced_header_line(self):
        result = repair("Jiwoo Lee\nE x p e r i e n c e\nSoftware Engineer at Acme")
        assert result == "Jiwoo Lee\n\nExperience\n\nSoftware Engineer at Acme"


class TestFinalCleanup:
    def test_collapses_whitespace_and_blank_runs(self):
        assert final_cleanup("a \t b\r\n\n\n\nc\x07") == "a b\n\nc"

    def test_strips_edges(self):
        assert final_cleanup("\n\n  text  \n\n") == "text"


class TestRepair:
    def test_empty_input(self):
        assert repair("") == ""
        assert repair("   \n\n ") == ""

    @pytest.mark.parametrize(
        "raw",
        [
            "J i w o o L e e\nj i w o o @ g m a i l . c o m\nE x p e r i e n c e",
            "Summary\nBuilt payment services\n● Python & Go\nEducation\nKAIST 2 0 1 8",
            "Contact: linkedin.com / in / jiwoo\n\n\n\nSkills\tPython,  SQL",
            "Grades:  A  B",
            "Ratings\tA\tB",
        ],
    )
    def test_idempotent(self, raw):
        once = repair(raw)
        assert repair(once) == once

    def test_plain_text_keeps_spacing(self):
        assert clean_plain_text("S k i l l s\n\n\nPython") == "S k i l l s\nPython"
