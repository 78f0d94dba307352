import json
import hashlib

from typer.testing import CliRunner

from hashtree_cli.__main__ import app

runner = CliRunner()


def _h(b: bytes) -> bytes:
    return hashlib.sha256(b).digest()


def _data_dir(tmp_path, n):
    d = tmp_path / "data"
    d.mkdir()
    for i in range(n):
        (d / f"{i:03d}.bin").write_bytes(bytes([i]))
    return d


def _expected_root_4():
    a, b, c, d = (_h(bytes([i])) for i in range(4))
    return _h(_h(a + b) + _h(c + d))


def test_root_command(tmp_path):
    d = _data_dir(tmp_path, 4)
    result = runner.invoke(app, ["root", str(d)])
    assert result.exit_code == 0, result.output
    assert _expected_root_4().hex() in result.output


def test_root_invalid_length(tmp_path):
    d = _data_dir(tmp_path, 3)
    result = runner.invoke(app, ["root", str(d)])
    assert result.exit_code == 2
    assert "invalid input length" in result.output


def test_verify_with_root(tmp_path):
    d = _data_dir(tmp_path, 4)
    root_hex = _expected_root_4().hex()
    ok = runner.invoke(app, ["verify", str(d), "--root", root_hex])
    assert ok.exit_code == 0, ok.output

    (d / "000.bin").write_bytes(b"\x01")
    bad = runner.invoke(app, ["verify", str(d), "--root", root_hex])
    assert bad.exit_code == 1


def test_verify_requires_one_source(tmp_path):
    d = _data_dir(tmp_path, 2)
    result = runner.invoke(app, ["verify", str(d)])
    assert result.exit_code != 0


def test_sign_and_verify_signed_root(tmp_path, signing_keys):
    d = _data_dir(tmp_path, 8)
    out = tmp_path / "root.json"
    result = runner.invoke(app, ["root", str(d), "--sign", "--out", str(out)])
    assert result.exit_code == 0, result.output
    obj = json.loads(out.read_text())
    assert obj["leaf_count"] == 8

    ok = runner.invoke(app, ["verify", str(d), "--signed-root", str(out)])
    assert ok.exit_code == 0, ok.output

    (d / "007.bin").write_bytes(b"tampered")
    bad = runner.invoke(app, ["verify", str(d), "--signed-root", str(out)])
    assert bad.exit_code == 1


def test_gen_keys(tmp_path):
    out = tmp_path / "keys"
    result = runner.invoke(app, ["gen-keys", "--out-dir", str(out)])
    assert result.exit_code == 0
    assert len((out / "ed25519_private.key").read_bytes()) == 32
    assert len((out / "ed25519_public.key").read_bytes()) == 32


def test_remote_root(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient
    from hashtree_api.main import app as api_app
    import hashtree_cli.__main__ as cli

    client = TestClient(api_app)

    def _post(url, json=None, timeout=None):
        assert url == "http://testserver/merkle/construct"
        return client.post("/merkle/construct", json=json)

    monkeypatch.setattr(cli.requests, "post", _post)
    d = _data_dir(tmp_path, 4)
    result = runner.invoke(app, ["remote-root", str(d), "--url", "http://testserver/"])
    assert result.exit_code == 0, result.output
    assert "matches_local" in result.output


def test_sign_from_inside_data_dir(tmp_path, monkeypatch, signing_keys):
    d = _data_dir(tmp_path, 4)
    monkeypatch.chdir(d)
    result = runner.invoke(app, ["root", ".", "--sign"])
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in d.iterdir()) == ["000.bin", "001.bin", "002.bin", "003.bin"]
    assert (tmp_path / "signed-root.json").exists()

    ok = runner.invoke(app, ["verify", ".", "--signed-root", "../signed-root.json"])
    assert ok.exit_code == 0, ok.output


def test_verify_signed_root_not_an_object(tmp_path):
    d = _data_dir(tmp_path, 4)
    bogus = tmp_path / "list.json"
    bogus.write_text(json.dumps([1, 2]))
    result = runner.invoke(app, ["verify", str(d), "--signed-root", str(bogus)])
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_verify_signed_root_not_json(tmp_path):
    d = _data_dir(tmp_path, 4)
    bogus = tmp_path / "broken.json"
    bogus.write_text("{not json")
    result = runner.invoke(app, ["verify", str(d), "--signed-root", str(bogus)])
    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)
    assert "not valid JSON" in result.output


def test_missing_data_dir_is_usage_error(tmp_path):
    result = runner.invoke(app, ["root", str(tmp_path / "nope")])
    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)
    assert "not a directory" in result.output
    assert "invalid input length" not in result.output


def test_out_help_describes_default():
    import typer.main

    command = typer.main.get_command(app).commands["root"]
    out = next(p for p in command.params if p.name == "out")
    assert "next to DIR" in out.help
