"""
PDF materials report — generator output and the download endpoint.
"""

import base64
from unittest.mock import patch

from fpdf import FPDF

from construlab.calculators.slab import SlabCalculator
from construlab.pdf_generator import _safe, generate_materials_pdf

# 1x1 transparent PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def _estimate(lang="pt"):
    return SlabCalculator().calculate({"area_m2": 80, "thickness": 0.15}, lang=lang)


def _render(estimate, **kwargs):
    """Generate a report, returning the texts passed to FPDF.cell and the FPDF.image mock."""
    texts = []
    original_cell = FPDF.cell

    def recording_cell(self, *args, **kw):
        if len(args) > 2:
            texts.append(str(args[2]))
        return original_cell(self, *args, **kw)

    with patch.object(FPDF, "cell", recording_cell), patch.object(FPDF, "image") as image:
        pdf = generate_materials_pdf(estimate, **kwargs)
    assert pdf.startswith(b"%PDF")
    return texts, image


def _write_logo(tmp_path, relative="uploads/logos/logo.png"):
    path = tmp_path / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(PNG_1X1)
    return path


def test_generates_pdf_bytes():
    pdf = generate_materials_pdf(_estimate())
    assert isinstance(pdf, bytes)
    assert pdf.startswith(b"%PDF")


def test_pdf_without_steel_breakdown():
    estimate = _estimate("en")
    estimate["steel_breakdown"] = None
    pdf = generate_materials_pdf(estimate, lang="en", project_name="Garage")
    assert pdf.startswith(b"%PDF")


def test_white_label_with_missing_logo_still_renders():
    pdf = generate_materials_pdf(
        _estimate(),
        branding={"company_name": "Silva Lda", "company_logo_url": "/uploads/logos/missing.png"},
    )
    assert pdf.startswith(b"%PDF")


def test_default_report_carries_product_branding():
    texts, image = _render(_estimate())
    assert "Construlab Pro" in texts
    assert "Gerado por Construlab Pro" in texts
    image.assert_not_called()


def test_white_label_header_uses_company_name_and_logo(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    logo = _write_logo(tmp_path)

    texts, image = _render(
        _estimate(),
        branding={"company_name": "Silva Lda", "company_logo_url": "/uploads/logos/logo.png"},
    )

    assert "Silva Lda" in texts
    assert not any("Construlab Pro" in text for text in texts)
    assert not any("Gerado por" in text for text in texts)
    image.assert_called_once()
    assert image.call_args.args[0] == str(logo.resolve())


def test_white_label_refuses_logo_outside_uploads(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "uploads").mkdir()
    _write_logo(tmp_path, "secret.png")

    texts, image = _render(
        _estimate(),
        branding={"company_name": "Silva Lda", "company_logo_url": "/uploads/../secret.png"},
    )

    assert "Silva Lda" in texts
    image.assert_not_called()


def test_white_label_ignores_remote_logo_url():
    texts, image = _render(
        _estimate(),
        branding={"company_name": "Silva Lda", "company_logo_url": "https://cdn.example.com/logo.png"},
    )
    assert "Silva Lda" in texts
    image.assert_not_called()


def test_safe_replaces_unicode_punctuation():
    assert _safe("a — b → c") == "a  -  b -> c"
    assert _safe(None) == ""


def test_pdf_endpoint_anonymous(client):
    response = client.post("/api/estimates/pdf", json={
        "mode": "box", "length": 4, "width": 0.3, "height": 0.4, "project_name": "Viga Garagem",
    })
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="Construlab-Viga-Garagem.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_pdf_endpoint_free_user_not_white_labeled(client, auth_headers):
    with patch("construlab.routers.estimates.generate_materials_pdf", return_value=b"%PDF-1.4") as gen:
        response = client.post("/api/estimates/pdf", json={"mode": "slab", "area_m2": 10, "thickness": 0.1},
                               headers=auth_headers)
    assert response.status_code == 200
    assert gen.call_args.kwargs["branding"] is None
    assert gen.call_args.args[0]["steel_breakdown"] is None


def test_pdf_endpoint_pro_white_label(client, pro_headers):
    client.put("/api/auth/profile", json={"company_name": "Silva Lda"}, headers=pro_headers)
    with patch("construlab.routers.estimates.generate_materials_pdf", return_value=b"%PDF-1.4") as gen:
        response = client.post("/api/estimates/pdf", json={"mode": "slab", "area_m2": 10, "thickness": 0.1},
                               headers=pro_headers)
    assert response.status_code == 200
    assert gen.call_args.kwargs["branding"]["company_name"] == "Silva Lda"
    assert gen.call_args.args[0]["steel_breakdown"] is not None
