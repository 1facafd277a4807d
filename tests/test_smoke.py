import base64

from fastapi.testclient import TestClient
from htmlcode.main import app

client = TestClient(app)

def _post(raw, shape="mdpage", filename="records.csv"):
    files = {"file": (filename, raw, "text/csv")}
    return client.post("/convert", params={"shape": shape}, files=files)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_shapes():
    r = client.get("/shapes")
    assert r.status_code == 200

    shapes = {s["key"]: s for s in r.json()}
    assert shapes["adpage"]["fields_per_record"] == 2
    assert [f["label"] for f in shapes["adpage"]["fields"]] == ["Company Name", "Company Address", "Link"]
    assert shapes["adpage"]["fields"][2]["role"] == "link-or-code"

def test_convert_records_and_export():
    raw = b"Acme Corp,123 Main St. Suite 4,http://x.com/a-b\n"
    r = _post(raw, shape="page40000")
    assert r.status_code == 200

    data = r.json()
    assert data["layout"] == "csv"
    assert data["records"][0]["Link"] == "http&#58;&#47;&#47;x&#8901;com&#47;a&#45;b"
    assert data["html"].startswith("<doctypehtml1>\n<html>\n<body>\n")
    assert data["report"]["summary"]["records"] == 1

    out_bytes = base64.b64decode(data["export"]["content_b64"])
    # UTF-8 BOM bytes
    assert out_bytes.startswith(b"\xef\xbb\xbf")
    out_text = out_bytes.decode("utf-8-sig")
    assert out_text.splitlines()[0] == "HTML Tag\tDetails 1\tDetails 2\tLink"

def test_convert_latin1_upload():
    # Include a Latin-1 character to force non-ASCII handling
    raw = "name,city,country\nPaul,Montréal,Canada\n".encode("latin-1")

    r = _post(raw)
    assert r.status_code == 200
    assert "Montréal" in r.json()["html"]

def test_skipped_records_are_reported():
    r = _post(b"a,b,c\nonly,two\n")
    assert r.status_code == 200

    report = r.json()["report"]
    assert report["summary"]["skipped"] == 1
    assert report["warnings"] == [
        {"row": 2, "column": None, "issue": "too_few_fields", "value": "2", "action": "skipped"}
    ]

def test_empty_file_is_rejected():
    r = _post(b"\n   \n")
    assert r.status_code == 422
    assert r.json()["detail"] == "File contains only empty lines."

def test_wrong_extension_is_rejected():
    r = _post(b"a,b,c\n", filename="records.pdf")
    assert r.status_code == 422

def test_unknown_shape():
    r = _post(b"a,b,c\n", shape="nope")
    assert r.status_code == 404

def test_upload_size_limit(monkeypatch):
    monkeypatch.setenv("HTMLCODE_MAX_UPLOAD_BYTES", "5")
    r = _post(b"a,b,c\nd,e,f\n")
    assert r.status_code == 413
