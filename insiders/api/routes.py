import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, File, HTTPException, Request, Response, UploadFile

from insiders.models.console import (
    CredentialsRequest,
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    TableSnapshot,
    UploadSummary,
)
from insiders.models.errors import BackendError, ErrorResponse
from insiders.models.session import SessionContext
from insiders.services import exporter
from insiders.services.api_client import BackendClient
from insiders.services.customer_table import CustomerTable
from insiders.services.field_reconciler import reconcile_row, reconcile_rows
from insiders.services.session_store import SessionStore
from insiders.services.upload_pipeline import UploadPipeline, UploadState

logger = logging.getLogger(__name__)

router = APIRouter()

# Envelope keys a login or signup response may wrap the customer in
RECORD_ENVELOPE_KEYS = ("data", "user", "customer")

# --- Dependencies ---

def get_client(request: Request) -> BackendClient:
    return request.app.state.backend

def get_table(request: Request) -> CustomerTable:
    return request.app.state.table

def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store

def require_admin(store: SessionStore = Depends(get_session_store)) -> SessionContext:
    context = store.load()
    if not context.is_admin:
        raise HTTPException(status_code=401, detail="Admin sign-in required")
    return context

def require_customer(store: SessionStore = Depends(get_session_store)) -> SessionContext:
    context = store.load()
    if not context.is_customer:
        raise HTTPException(status_code=401, detail="Customer sign-in required")
    return context

# --- Helpers ---

def _http_error(e: BackendError) -> HTTPException:
    # Client errors pass through, anything else is a bad gateway
    if e.status_code and 400 <= e.status_code < 500:
        return HTTPException(status_code=e.status_code, detail=e.message)
    return HTTPException(status_code=502, detail=e.message)

def _unwrap_record(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        return {}
    for key in RECORD_ENVELOPE_KEYS:
        if isinstance(body.get(key), dict):
            return body[key]
    return body

def _snapshot(table: CustomerTable) -> TableSnapshot:
    return TableSnapshot(columns=table.columns(), customers=table.rows())

async def _refresh(table: CustomerTable, client: BackendClient) -> TableSnapshot:
    table.replace(reconcile_rows(await client.list_customers()))
    return _snapshot(table)

# --- Customer self-service ---

@router.post(
    "/auth/signup",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def signup(
    request: SignupRequest,
    client: BackendClient = Depends(get_client),
    store: SessionStore = Depends(get_session_store),
):
    try:
        body = await client.signup(
            request.name, request.email, request.password, request.phone, request.is_employee
        )
    except BackendError as e:
        raise _http_error(e)

    record = _unwrap_record(body)
    if not record:
        return MessageResponse(message="Signed up")

    # Fill in what the backend did not echo back
    user = reconcile_row({"name": request.name, "email": request.email, "phone": request.phone, **record}, 1)
    store.save(SessionContext(user=user))
    return MessageResponse(message="Signed up", user=user.to_wire())

@router.post("/auth/login", response_model=MessageResponse, responses={401: {"model": ErrorResponse}})
async def login(
    request: CredentialsRequest,
    client: BackendClient = Depends(get_client),
    store: SessionStore = Depends(get_session_store),
):
    try:
        body = await client.login(request.email, request.password)
    except BackendError as e:
        raise _http_error(e)

    user = reconcile_row({"email": request.email, **_unwrap_record(body)}, 1)
    context = store.load()
    context.user = user
    store.save(context)
    return MessageResponse(message="Signed in", user=user.to_wire())

@router.post("/auth/logout", response_model=MessageResponse)
async def logout(store: SessionStore = Depends(get_session_store)):
    store.clear()
    return MessageResponse(message="Signed out")

@router.post("/auth/forgot-password", response_model=MessageResponse)
async def forgot_password(request: ForgotPasswordRequest, client: BackendClient = Depends(get_client)):
    try:
        body = await client.forgot_password(request.email)
    except BackendError as e:
        raise _http_error(e)
    message = body.get("message") if isinstance(body, dict) else None
    return MessageResponse(message=message or "Reset link sent")

@router.post("/auth/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, client: BackendClient = Depends(get_client)):
    try:
        body = await client.reset_password(request.token, request.new_password)
    except BackendError as e:
        raise _http_error(e)
    message = body.get("message") if isinstance(body, dict) else None
    return MessageResponse(message=message or "Password reset")

@router.get("/me")
async def get_profile(context: SessionContext = Depends(require_customer)):
    return context.user.to_wire()

@router.get("/me/refresh")
async def refresh_profile(
    context: SessionContext = Depends(require_customer),
    client: BackendClient = Depends(get_client),
    store: SessionStore = Depends(get_session_store),
):
    try:
        record = await client.get_customer(context.user.id)
    except BackendError as e:
        raise _http_error(e)

    context.user = reconcile_row({"id": context.user.id, **record}, 1)
    store.save(context)
    return context.user.to_wire()

# --- Admin console ---

@router.post("/auth/admin-login", response_model=MessageResponse, responses={401: {"model": ErrorResponse}})
async def admin_login(
    request: CredentialsRequest,
    client: BackendClient = Depends(get_client),
    store: SessionStore = Depends(get_session_store),
):
    try:
        body = await client.admin_login(request.email, request.password)
    except BackendError as e:
        raise _http_error(e)

    context = store.load()
    context.admin_email = request.email
    store.save(context)
    logger.info("Admin session started for %s", request.email)
    message = body.get("message") if isinstance(body, dict) else None
    return MessageResponse(message=message or "Login successful")

@router.post("/auth/admin-logout", response_model=MessageResponse)
async def admin_logout(
    store: SessionStore = Depends(get_session_store),
    table: CustomerTable = Depends(get_table),
):
    # A signed-in customer stays signed in
    context = store.load()
    context.admin_email = None
    store.save(context)
    table.replace([])
    return MessageResponse(message="Signed out")

@router.get("/customers", response_model=TableSnapshot, dependencies=[Depends(require_admin)])
async def list_customers(
    client: BackendClient = Depends(get_client),
    table: CustomerTable = Depends(get_table),
):
    try:
        return await _refresh(table, client)
    except BackendError as e:
        raise _http_error(e)

@router.post("/customers", response_model=TableSnapshot, dependencies=[Depends(require_admin)])
async def add_customer(
    customer: Dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_client),
    table: CustomerTable = Depends(get_table),
):
    pending = table.add_temporary(customer)
    payload = {**pending.to_wire(), "password": customer.get("password")}
    try:
        await client.add_customer(payload)
        return await _refresh(table, client)
    except BackendError as e:
        table.discard_temporary()
        raise _http_error(e)

@router.put("/customers/{customer_id}", response_model=TableSnapshot, dependencies=[Depends(require_admin)])
async def update_customer(
    customer_id: str,
    changes: Dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_client),
    table: CustomerTable = Depends(get_table),
):
    try:
        await client.update_customer(customer_id, changes)
        return await _refresh(table, client)
    except BackendError as e:
        raise _http_error(e)

@router.delete("/customers/{customer_id}", response_model=TableSnapshot, dependencies=[Depends(require_admin)])
async def delete_customer(
    customer_id: str,
    client: BackendClient = Depends(get_client),
    table: CustomerTable = Depends(get_table),
):
    try:
        await client.delete_customer(customer_id)
        return await _refresh(table, client)
    except BackendError as e:
        raise _http_error(e)

@router.delete("/customers", response_model=TableSnapshot, dependencies=[Depends(require_admin)])
async def delete_all_customers(
    client: BackendClient = Depends(get_client),
    table: CustomerTable = Depends(get_table),
):
    try:
        await client.delete_all_customers()
    except BackendError as e:
        raise _http_error(e)
    table.replace([])
    return _snapshot(table)

@router.post(
    "/customers/upload",
    response_model=UploadSummary,
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    dependencies=[Depends(require_admin)],
)
async def upload_customers(
    file: UploadFile = File(...),
    client: BackendClient = Depends(get_client),
    table: CustomerTable = Depends(get_table),
):
    content = await file.read()
    result = await UploadPipeline(client).run(file.filename or "upload.csv", content, file.content_type)

    if result.state != UploadState.SUCCESS:
        if result.failure == "no_data":
            raise HTTPException(status_code=422, detail=result.error)
        raise _http_error(BackendError(result.error or "Failed to upload CSV", result.status_code))

    table.replace(result.records)
    logger.info("Loaded %d customers from %s (%s)", len(result.records), file.filename, result.source)
    snapshot = _snapshot(table)
    return UploadSummary(
        columns=snapshot.columns,
        customers=snapshot.customers,
        source=result.source,
        count=len(result.records),
    )

@router.get("/customers/export/csv", dependencies=[Depends(require_admin)])
async def export_csv(table: CustomerTable = Depends(get_table)):
    data = exporter.export_csv(table)
    exporter.write_export(data, exporter.CSV_FILENAME)
    return Response(
        content=data,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{exporter.CSV_FILENAME}"'},
    )

@router.get("/customers/export/xlsx", dependencies=[Depends(require_admin)])
async def export_xlsx(table: CustomerTable = Depends(get_table)):
    data = exporter.export_xlsx(table)
    exporter.write_export(data, exporter.XLSX_FILENAME)
    return Response(
        content=data,
        media_type=exporter.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{exporter.XLSX_FILENAME}"'},
    )
