"""
FastAPI app: read-only report of orphaned API Gateway endpoints.
Reconciles the project file (DASH_PROJECT_PATH) with the live REST API on each request.
Nothing is deployed or removed from here; use scripts/dash_deploy.py for that.
"""

from io import BytesIO

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response
from openpyxl import Workbook

from dashdeploy.config import get_page_limit, get_project_path
from dashdeploy.errors import DashDeployError, ProjectConfigError, ProviderLookupError
from dashdeploy.inventory import fetch_deployed_api
from dashdeploy.orphans import orphan_report
from dashdeploy.project import list_local_functions, load_project
from dashdeploy.regions import get_regions

app = FastAPI(title="Dash Deploy", version="0.1.0")


def get_orphaned_endpoints(stage: str, region: str) -> list[dict]:
    try:
        project = load_project(get_project_path())
        api = fetch_deployed_api(project, stage, region, page_limit=get_page_limit())
    except ProjectConfigError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProviderLookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except DashDeployError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    # The report always covers the whole project, whatever directory the server runs in.
    functions = list_local_functions(project, project.root)
    return [o.to_dict() for o in orphan_report(functions, api)]


@app.get("/")
def root():
    return {"service": "dash-deploy", "orphaned_endpoints": "/api/orphaned-endpoints"}


@app.get("/api/regions")
def list_regions():
    return {"regions": get_regions()}


@app.get("/api/orphaned-endpoints")
def api_orphaned_endpoints(stage: str = Query(...), region: str = Query(...)):
    """JSON list of deployed endpoints with no local definition."""
    return get_orphaned_endpoints(stage, region)


@app.get("/api/orphaned-endpoints/export")
def api_orphaned_endpoints_export(stage: str = Query(...), region: str = Query(...)):
    """Download the orphaned endpoints as an Excel file."""
    rows = get_orphaned_endpoints(stage, region)
    wb = Workbook()
    ws = wb.active
    ws.title = "Orphaned endpoints"
    headers = ["Function", "Endpoint", "Method", "Resource ID", "Console URL"]
    ws.append(headers)
    for r in rows:
        ws.append([
            r.get("function", ""),
            r.get("endpoint", ""),
            r.get("method", ""),
            r.get("resource_id", ""),
            r.get("console_url", ""),
        ])
    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    return Response(
        content=buf.getvalue(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=orphaned-endpoints-{stage}-{region}.xlsx"},
    )
