from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cloudbill.core.config import settings
from cloudbill.routers import gst, hsn_codes, invoices, usage

OPENAPI_TAGS = [
    {"name": "Usage", "description": "Meter active resources and query usage records."},
    {"name": "Invoices", "description": "Generate GST invoices and manage their lifecycle."},
    {"name": "GST", "description": "GST calculation, GSTIN/PAN validation and HSN/SAC codes."},
    {"name": "HSN Codes", "description": "Maintain the HSN/SAC reference table."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Usage-based billing for cloud infrastructure with Indian GST. "
        "Meter resource usage, generate invoices in paise and compute CGST/SGST/IGST."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

app.include_router(usage.router, prefix="/v1/usage", tags=["Usage"])
app.include_router(invoices.router, prefix="/v1/invoices", tags=["Invoices"])
app.include_router(gst.router, prefix="/v1/gst", tags=["GST"])
app.include_router(hsn_codes.router, prefix="/v1/hsn_codes", tags=["HSN Codes"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
