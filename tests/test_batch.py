import itertools
import json
import sys

import pandas as pd
import pytest

import src.pricing.batch as batch
from src.pricing.config import EstimatorConfig, Gender
from src.pricing.estimate import EstimateRequest, estimate
from src.utils.config import ProjectPaths


def request_grid():
    rows = []
    for category, gender, age, coverage, term, smoker in itertools.product(
        ["MedicalExpense", "Cancer", "Driver", "Dental", "WholeLife", "Pension", "Mystery"],
        ["male", "female"],
        [0, 29, 30, 45, 59, 60, 100],
        [1000, 5000, 7500, 10000],
        ["10", "20", "30", "100", "15"],
        [False, True],
    ):
        rows.append(
            {
                "category": category,
                "gender": gender,
                "age": age,
                "coverage_unit": coverage,
                "term_years": term,
                "is_smoker": smoker,
            }
        )
    return pd.DataFrame(rows)


def test_estimate_frame_matches_single_estimates():
    df = request_grid()
    priced = batch.estimate_frame(df)

    expected = [
        estimate(
            EstimateRequest(
                r.category, Gender(r.gender), r.age, r.coverage_unit, r.term_years, bool(r.is_smoker)
            )
        ).monthly_premium
        for r in df.itertuples(index=False)
    ]
    assert priced["monthly_premium"].tolist() == expected
    assert str(priced["monthly_premium"].dtype) == "int64"


def test_estimate_frame_normalises_messy_columns():
    df = pd.DataFrame(
        {
            "category": ["Cancer", "Driver", "Pension"],
            "gender": [" Female", "MALE", "female"],
            "age": [45, 25, 20],
            "coverage_unit": [5000, 10000, 5000],
            "term_years": [20.0, 10.0, 30.0],
            "is_smoker": ["no", "Yes", None],
        }
    )
    priced = batch.estimate_frame(df)
    assert priced["monthly_premium"].tolist() == [43200, 30000, 91200]


def test_estimate_frame_does_not_modify_input():
    df = request_grid().head(3)
    before = df.copy()
    batch.estimate_frame(df)
    pd.testing.assert_frame_equal(df, before)


def test_estimate_frame_requires_columns():
    df = pd.DataFrame({"category": ["Cancer"], "age": [40]})
    with pytest.raises(ValueError, match="Missing required columns"):
        batch.estimate_frame(df)


def test_rate_sheet_layout_and_values():
    sheet = batch.rate_sheet(ages=range(25, 66, 5))
    assert list(sheet.columns) == ["MedicalExpense", "Cancer", "Driver", "Dental", "WholeLife", "Pension"]
    assert list(sheet.index) == [25, 30, 35, 40, 45, 50, 55, 60, 65]
    assert sheet.loc[35, "MedicalExpense"] == 25000
    assert sheet.loc[25, "Driver"] == 14400
    assert sheet.loc[65, "Pension"] == 200000


def test_summarise_reports_unknown_categories():
    priced = batch.estimate_frame(request_grid())
    report = batch.summarise(priced, EstimatorConfig())
    assert report.rows == len(priced)
    assert report.unknown_categories == ["Mystery"]
    assert report.min_premium <= report.mean_premium <= report.max_premium
    assert set(report.mean_premium_by_category) == set(priced["category"])


def test_cli_writes_outputs(tmp_path, monkeypatch):
    in_path = tmp_path / "requests.csv"
    pd.DataFrame(
        {
            "category": ["MedicalExpense", "UnknownType"],
            "gender": ["male", "male"],
            "age": [35, 65],
            "coverage_unit": [5000, 5000],
            "term_years": ["20", "100"],
            "is_smoker": [False, False],
        }
    ).to_csv(in_path, index=False)

    out_path = tmp_path / "out" / "estimates.csv"
    report_path = tmp_path / "out" / "summary.json"
    sheet_path = tmp_path / "out" / "sheet.csv"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "batch",
            "--in_path", str(in_path),
            "--out_path", str(out_path),
            "--report_path", str(report_path),
            "--rate_sheet_path", str(sheet_path),
        ],
    )

    batch.main()

    priced = pd.read_csv(out_path)
    assert priced["monthly_premium"].tolist() == [25000, 60000]
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["rows"] == 2
    assert report["unknown_categories"] == ["UnknownType"]
    assert len(pd.read_csv(sheet_path)) == 101


def test_cli_upload_requires_bucket(tmp_path, monkeypatch):
    in_path = tmp_path / "requests.csv"
    batch_df = request_grid().head(2)
    batch_df.to_csv(in_path, index=False)
    monkeypatch.delenv("S3_BUCKET", raising=False)
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "batch",
            "--in_path", str(in_path),
            "--out_path", str(tmp_path / "e.csv"),
            "--report_path", str(tmp_path / "r.json"),
            "--upload",
        ],
    )
    with pytest.raises(ValueError, match="S3_BUCKET"):
        batch.main()


def test_cli_upload_sends_outputs_to_s3(tmp_path, monkeypatch):
    in_path = tmp_path / "requests.csv"
    request_grid().head(2).to_csv(in_path, index=False)

    uploaded = []

    class FakeS3:
        def upload_file(self, local, bucket, key):
            uploaded.append((bucket, key))

    monkeypatch.setenv("S3_BUCKET", "quotes-bucket")
    monkeypatch.setenv("S3_PREFIX", "estimator")
    monkeypatch.setattr("src.utils.io._boto3_client", lambda service, region=None: FakeS3())
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "batch",
            "--in_path", str(in_path),
            "--out_path", str(tmp_path / "e.csv"),
            "--report_path", str(tmp_path / "r.json"),
            "--upload",
        ],
    )

    batch.main()

    assert uploaded == [("quotes-bucket", "estimator/e.csv"), ("quotes-bucket", "estimator/r.json")]


def one_row(**kwargs):
    row = {
        "category": "Cancer",
        "gender": "male",
        "age": 40,
        "coverage_unit": 5000,
        "term_years": "20",
        "is_smoker": False,
    }
    row.update(kwargs)
    return row


@pytest.mark.parametrize(
    "bad, match",
    [
        ({"age": None}, "age"),
        ({"age": "abc"}, "age"),
        ({"age": 101}, "age"),
        ({"age": -1}, "age"),
        ({"coverage_unit": None}, "coverage_unit"),
        ({"coverage_unit": 0}, "coverage_unit"),
    ],
)
def test_estimate_frame_rejects_invalid_rows(bad, match):
    df = pd.DataFrame([one_row(), one_row(**bad)])
    with pytest.raises(ValueError, match=match) as exc:
        batch.estimate_frame(df)
    assert "Invalid rows: [1]" in str(exc.value)


def test_cli_paths_resolve_from_repo_root(tmp_path, monkeypatch):
    reports_dir = tmp_path / "reports"
    monkeypatch.setattr(
        batch,
        "get_paths",
        lambda: ProjectPaths(root=tmp_path, reports_dir=reports_dir, rate_sheets_dir=reports_dir / "rate_sheets"),
    )
    (tmp_path / "data").mkdir()
    pd.DataFrame([one_row()]).to_csv(tmp_path / "data" / "requests.csv", index=False)
    monkeypatch.setattr(
        sys,
        "argv",
        ["batch", "--in_path", "data/requests.csv", "--rate_sheet", "--rate_sheet_gender", "female"],
    )

    batch.main()

    assert pd.read_csv(reports_dir / "estimates.csv")["monthly_premium"].tolist() == [45500]
    assert (reports_dir / "estimate_summary.json").exists()
    assert (reports_dir / "rate_sheets" / "female_20y_5000.csv").exists()
