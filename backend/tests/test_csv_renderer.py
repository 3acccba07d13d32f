"""Tests for the CSV deliverable."""
from msa_lending.aggregation.engine import aggregate_records
from msa_lending.models.loan import LoanRecord
from msa_lending.services.csv_renderer import (
    BASE_HEADER,
    format_number,
    quote_name,
    render_csv,
    write_csv,
)


def _record(**overrides) -> LoanRecord:
    defaults = dict(
        region_id="10180",
        census_tract="001",
        race_category="White",
        loan_amount="100",
        loan_to_value_ratio="80.5",
        interest_rate="4.25",
        total_loan_costs="3000",
        loan_term_months="360",
        property_value="150000",
        income="50",
        tract_minority_population_percent="20",
    )
    defaults.update(overrides)
    return LoanRecord(**defaults)


def test_header_has_fixed_columns_then_races():
    result = aggregate_records([
        _record(race_category="White"),
        _record(race_category="Asian"),
    ])
    lines = render_csv(result, [("10180", "Abilene, TX")])

    header = lines[0].split(",")
    assert header[:11] == list(BASE_HEADER)
    assert header[11:] == ["White", "Asian"]


def test_row_layout():
    result = aggregate_records([_record()])
    lines = render_csv(result, [("10180", "Abilene, TX")])

    assert lines[1] == '"Abilene, TX",10180,1,100,80.5,4.25,3000,360,150000,50000,20,1'


def test_missing_race_counts_default_to_zero():
    result = aggregate_records([
        _record(region_id="10180", race_category="White"),
        _record(region_id="10500", race_category="Asian"),
    ])
    lines = render_csv(result, [("10180", "A"), ("10500", "B")])

    assert lines[1].endswith(",1,0")
    assert lines[2].endswith(",0,1")


def test_regions_without_loans_omitted():
    result = aggregate_records([_record(region_id="10500")])
    lines = render_csv(result, [("10180", "No loans"), ("10500", "Albany, GA")])

    assert len(lines) == 2
    assert lines[1].startswith('"Albany, GA",10500,')


def test_rows_follow_region_list_order():
    result = aggregate_records([_record(region_id="10500"), _record(region_id="10180")])
    lines = render_csv(result, [("10180", "A"), ("10500", "B")])
    assert [line.split(",")[1] for line in lines[1:]] == ["10180", "10500"]


def test_empty_result_is_header_only():
    lines = render_csv(aggregate_records([]), [("10180", "A")])
    assert lines == [",".join(BASE_HEADER)]


def test_quote_name_doubles_embedded_quotes():
    assert quote_name("Abilene, TX") == '"Abilene, TX"'
    assert quote_name('The "Metro"') == '"The ""Metro"""'


def test_format_number():
    assert format_number(100.0) == "100"
    assert format_number(12.5) == "12.5"
    assert format_number(0.07) == "0.07"
    assert format_number(3) == "3"


def test_write_csv(tmp_path):
    path = write_csv(["a,b", "1,2"], tmp_path / "out" / "aggregateOutput.csv")
    assert path.read_text() == "a,b\n1,2"
