"""
Tests for reading scrape targets from a CSV export.
"""
import pytest

from boxd_meta.scraper.errors import InputError
from boxd_meta.scraper.targets import read_targets
from boxd_meta.scraper.types import ScrapeTarget


ROWS = [
    ("2025-11-10", "The Shawshank Redemption", "1994", "https://letterboxd.com/film/the-shawshank-redemption/"),
    ("2025-11-10", "The Godfather", "1972", "https://letterboxd.com/film/the-godfather/"),
    ("2025-11-10", "Pulp Fiction", "1994", "https://letterboxd.com/film/pulp-fiction/"),
]


class TestReadTargets:
    def test_reads_after_preamble(self, write_csv):
        targets = read_targets(write_csv(ROWS))
        assert len(targets) == 3
        assert targets[1] == ScrapeTarget("https://letterboxd.com/film/the-godfather/", "The Godfather")

    def test_keeps_input_order(self, write_csv):
        targets = read_targets(write_csv(ROWS))
        assert [t.hint_title for t in targets] == ["The Shawshank Redemption", "The Godfather", "Pulp Fiction"]

    def test_limit(self, write_csv):
        assert len(read_targets(write_csv(ROWS), limit=2)) == 2

    def test_limit_zero(self, write_csv):
        assert read_targets(write_csv(ROWS), limit=0) == []

    def test_no_preamble(self, write_csv):
        targets = read_targets(write_csv(ROWS, preamble=False), skip_lines=0)
        assert len(targets) == 3

    def test_title_column_used_when_no_name(self, write_csv):
        rows = [("Heat", "https://letterboxd.com/film/heat-1995/")]
        targets = read_targets(write_csv(rows, header=("Title", "URL"), preamble=False), skip_lines=0)
        assert targets == [ScrapeTarget("https://letterboxd.com/film/heat-1995/", "Heat")]

    def test_name_preferred_over_title(self, write_csv):
        rows = [("From Name", "From Title", "https://letterboxd.com/film/x/")]
        targets = read_targets(write_csv(rows, header=("Name", "Title", "URL"), preamble=False), skip_lines=0)
        assert targets[0].hint_title == "From Name"

    def test_missing_title_column_gives_empty_hint(self, write_csv):
        rows = [("https://letterboxd.com/film/x/",)]
        targets = read_targets(write_csv(rows, header=("URL",), preamble=False), skip_lines=0)
        assert targets == [ScrapeTarget("https://letterboxd.com/film/x/", "")]

    def test_missing_url_column(self, write_csv):
        rows = [("Heat", "1995")]
        with pytest.raises(InputError, match="URL"):
            read_targets(write_csv(rows, header=("Name", "Year"), preamble=False), skip_lines=0)

    def test_blank_url_row(self, write_csv):
        rows = [("Heat", "")]
        with pytest.raises(InputError):
            read_targets(write_csv(rows, header=("Name", "URL"), preamble=False), skip_lines=0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputError):
            read_targets(tmp_path / "nope.csv")

    def test_negative_skip(self, write_csv):
        with pytest.raises(InputError):
            read_targets(write_csv(ROWS), skip_lines=-1)
