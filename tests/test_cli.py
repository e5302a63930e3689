import io
import json

import pytest
from botocore.exceptions import ProfileNotFound

from sdkpolicy import cli


@pytest.fixture
def datasets(tmp_path, raw_catalogue, raw_mappings):
    cat_path = tmp_path / "iam_definition.json"
    map_path = tmp_path / "map.json"
    cat_path.write_text(json.dumps(raw_catalogue), "utf-8")
    map_path.write_text(json.dumps(raw_mappings), "utf-8")
    return ["--catalogue", str(cat_path), "--mappings", str(map_path)]


def _calls_file(tmp_path, calls):
    path = tmp_path / "calls.json"
    path.write_text(json.dumps(calls), "utf-8")
    return str(path)


class FakeSts:
    def get_caller_identity(self):
        return {"Account": "444455556666"}


class FakeSession:
    def __init__(self, profile_name=None):
        self.profile_name = profile_name
        self.region_name = "cn-north-1"

    def client(self, name, config=None):
        assert name == "sts"
        return FakeSts()

    def get_partition_for_region(self, region):
        return "aws-cn"


def test_generates_policy_to_stdout(tmp_path, datasets, capsys):
    calls = _calls_file(tmp_path, [
        {"service": "S3", "method": "getObject", "params": {"BucketName": "my-bucket", "ObjectKey": "a.txt"}},
        {"service": "S3", "method": "endpoint"},
    ])

    assert cli.main(datasets + ["--calls", calls]) == 0

    policy = json.loads(capsys.readouterr().out)
    assert policy["Statement"] == [
        {"Effect": "Allow", "Action": "s3:GetObject", "Resource": "arn:aws:s3:::my-bucket/a.txt"},
    ]


def test_reads_calls_from_stdin(datasets, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('{"service": "S3", "method": "listAllMyBuckets"}\n'))

    assert cli.main(datasets) == 0
    assert json.loads(capsys.readouterr().out)["Statement"][0]["Action"] == "s3:ListAllMyBuckets"


def test_writes_policy_file(tmp_path, datasets, capsys):
    calls = _calls_file(tmp_path, [{"service": "Lambda", "method": "invokeFunction", "params": {"FunctionName": "fn"}}])
    out = tmp_path / "policy.json"

    assert cli.main(datasets + ["--calls", calls, "--out", str(out), "--region", "eu-west-1", "--account-id", "111122223333"]) == 0

    policy = json.loads(out.read_text("utf-8"))
    assert policy["Statement"][0]["Resource"] == "arn:aws:lambda:eu-west-1:111122223333:function:fn"
    assert capsys.readouterr().out == ""


def test_unmatched_call_exits_non_zero(tmp_path, datasets, capsys):
    calls = _calls_file(tmp_path, [{"service": "UnknownService", "method": "UnknownMethod"}])

    assert cli.main(datasets + ["--calls", calls]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "unknownservice:UnknownMethod" in captured.err


def test_missing_catalogue_exits_non_zero(tmp_path, capsys):
    assert cli.main(["--catalogue", str(tmp_path / "missing.json"), "--mappings", str(tmp_path / "map.json")]) == 1
    assert "Error reading input" in capsys.readouterr().err


def test_explain_and_verbose(tmp_path, datasets, capsys):
    calls = _calls_file(tmp_path, [
        {"service": "S3", "method": "listAllMyBuckets"},
        {"service": "STS", "method": "getCallerIdentity"},
    ])

    assert cli.main(datasets + ["--calls", calls, "--explain", "-v"]) == 0

    err = capsys.readouterr().err
    assert "s3:ListAllMyBuckets" in err
    assert "Grants permission to list all buckets owned by the sender" in err
    assert "skipped 1 permissionless call(s)" in err


def test_profile_fills_context(tmp_path, datasets, capsys, monkeypatch):
    monkeypatch.setattr(cli.boto3, "Session", FakeSession)
    calls = _calls_file(tmp_path, [{"service": "Lambda", "method": "invokeFunction", "params": {"FunctionName": "fn"}}])

    assert cli.main(datasets + ["--calls", calls, "--profile", "dev"]) == 0

    policy = json.loads(capsys.readouterr().out)
    assert policy["Statement"][0]["Resource"] == "arn:aws-cn:lambda:cn-north-1:444455556666:function:fn"


def test_explicit_flags_win_over_profile(monkeypatch):
    monkeypatch.setattr(cli.boto3, "Session", FakeSession)
    ctx = cli.resolve_context("dev", partition="aws", region="us-west-2", account_id="123123123123")
    assert (ctx.partition, ctx.region, ctx.account_id) == ("aws", "us-west-2", "123123123123")


def test_unknown_profile_exits_non_zero(datasets, capsys, monkeypatch):
    def raise_not_found(profile_name=None):
        raise ProfileNotFound(profile=profile_name)

    monkeypatch.setattr(cli.boto3, "Session", raise_not_found)

    assert cli.main(datasets + ["--profile", "ghost"]) == 1
    assert "ghost" in capsys.readouterr().err
