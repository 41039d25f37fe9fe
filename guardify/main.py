from fastapi import FastAPI
from .routes.checkout import router as checkout_router
from .routes.stats import router as stats_router

app = FastAPI(title="Guardify Checkout Guard",
              description="Checkout fraud checks for the storefront: BD phone validation and VPN/proxy blocking",
    version="0.1.0",
    docs_url="/docs",          # Swagger UI
    redoc_url="/redoc",        # ReDoc
    openapi_url="/openapi.json")

app.include_router(checkout_router)
app.include_router(stats_router)

@app.get("/health")
def health():
    return {"ok": True}
