"""
Excel export tests.
"""
import io
import zipfile

from app.exporters.excel_exporter import ExcelExporter
from app.services import export_service

FY = '2024-25'
XLSX = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _workbook_xml(content: bytes) -> str:
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        return archive.read('xl/workbook.xml').decode('utf-8')


def test_exporter_builds_named_sheets():
    exporter = ExcelExporter(title='Budget Summary', filters={'Fiscal year': FY})
    exporter.add_header()
    exporter.add_kpi_row({'Allocated': 100.0, 'Utilized': 25.0})
    exporter.add_data_table(['Category', 'Allocated'], [['TRAVEL', 100.0]], numeric_cols={1})
    exporter.add_sheet('Entries').add_data_table(['Project'], [])

    content = exporter.finalize()

    assert content[:2] == b'PK'
    workbook = _workbook_xml(content)
    assert 'name="Summary"' in workbook
    assert 'name="Entries"' in workbook


def test_archive_sheet_only_after_archival(db_session, add_entry, project):
    add_entry(project, 'EQUIPMENT', FY, allocated=1000, utilized=250)

    content, filename, media_type = export_service.export_budget_summary(db_session, FY)

    assert filename == f'budget_summary_{FY}.xlsx'
    assert media_type == XLSX
    assert 'Year-end archive' not in _workbook_xml(content)


def test_export_endpoint(client, supervisor_headers, add_entry, project):
    add_entry(project, 'EQUIPMENT', FY, allocated=1000, utilized=250)

    response = client.get('/api/export/budget-summary', params={'fiscal_year': FY}, headers=supervisor_headers)

    assert response.status_code == 200
    assert response.headers['content-type'] == XLSX
    assert f'budget_summary_{FY}.xlsx' in response.headers['content-disposition']
    assert response.content[:2] == b'PK'


def test_export_includes_archive_sheet(client, supervisor_headers, add_entry, project):
    add_entry(project, 'EQUIPMENT', FY, allocated=1000, utilized=250)
    client.post('/api/budget/archive', json={'fiscal_year': FY}, headers=supervisor_headers)

    response = client.get('/api/export/budget-summary', params={'fiscal_year': FY}, headers=supervisor_headers)

    assert 'name="Year-end archive"' in _workbook_xml(response.content)


def test_export_forbidden_for_project_head(client, head_headers):
    assert client.get('/api/export/budget-summary', headers=head_headers).status_code == 403
