# app/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, warehouse_engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from shared.models import users
from .models.masters import categories, departments, items, locations, warehouses
from .models.stock import inventory, transactions
from .models.transfers import rejected_goods, transfers
from .models.requests import requests, transfer_notifications
from .models.sales import clients, sales_orders
from .models.system import approval_settings, notifications, organization_settings
from .models.issues import issues
from .router.masters import (
    auth_router, categories_router, departments_router, items_router, locations_router, users_router,
    warehouses_router)
from .router.stock import inventory_router, transactions_router
from .router.requests import request_approvals_router, requests_router, transfer_notifications_router
from .router.transfers import rejected_goods_router, transfers_router
from .router.reports import analytics_router, dashboard_router, export_router, reports_router
from .router.system import approval_settings_router, notifications_router, organization_settings_router
from .router.issues import issues_router
from .router.sales import clients_router, sales_orders_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Create all tables
Base.metadata.create_all(bind=warehouse_engine)

app = FastAPI(title=settings.APP_NAME)

# 1️⃣ CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2️⃣ Custom JSON response wrapper middleware
app.add_middleware(JsonResponseMiddleware)

# Register exception handlers
setup_exception_handlers(app)

# Include routers
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(departments_router.router)
app.include_router(categories_router.router)
app.include_router(locations_router.router)
app.include_router(warehouses_router.router)
app.include_router(items_router.router)
app.include_router(inventory_router.router)
app.include_router(transactions_router.router)
app.include_router(requests_router.router)
app.include_router(request_approvals_router.router)
app.include_router(transfer_notifications_router.router)
app.include_router(transfers_router.router)
app.include_router(rejected_goods_router.router)
app.include_router(reports_router.router)
app.include_router(analytics_router.router)
app.include_router(dashboard_router.router)
app.include_router(export_router.router)
app.include_router(organization_settings_router.router)
app.include_router(approval_settings_router.router)
app.include_router(notifications_router.router)
app.include_router(clients_router.router)
app.include_router(sales_orders_router.router)
app.include_router(issues_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
