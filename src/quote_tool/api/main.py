import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from quote_tool import __version__
from quote_tool.api.state import factory, quote_service, repository, settings
from quote_tool.engine.models import OrderContext, Product, ProductType
from quote_tool.errors import (
    ConfigurationError,
    ProductNotFoundError,
    QuoteToolError,
    ValidationError,
)

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Quote Tool API",
    description="Business rule evaluation for dynamic quote forms",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_STATUS = {
    ValidationError: 422,
    ProductNotFoundError: 404,
    ConfigurationError: 500,
}


class QuoteRequest(BaseModel):
    product_id: str
    quantity: int
    delivery_date: date
    field_values: Dict[str, Any] = {}


def product_to_dict(product: Product) -> dict:
    data = {"type": product.product_type.value}
    data.update(asdict(product))
    return data


@app.exception_handler(QuoteToolError)
async def quote_tool_error_handler(request: Request, exc: QuoteToolError):
    status = next((s for cls, s in ERROR_STATUS.items() if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_response().model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    error = ValidationError("Invalid request", {"errors": jsonable_encoder(exc.errors())})
    return JSONResponse(status_code=422, content=error.to_response().model_dump())


@app.get("/")
async def root():
    return {"status": "online", "message": "Quote Tool API Active", "products": len(repository)}


@app.get("/products")
async def list_products(type: Optional[str] = None):
    if type:
        try:
            product_type = ProductType(type.strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown product type '{type}'", {"product_type": type})
        products = repository.list_by_type(product_type)
    else:
        products = repository.list_products()
    return [product_to_dict(p) for p in products]


@app.get("/products/{product_id}")
async def get_product(product_id: str):
    return product_to_dict(repository.get(product_id))


@app.post("/products", status_code=201)
async def create_product(data: Dict[str, Any]):
    product = repository.add(factory.create(data))
    logger.info("Product %s added (%s)", product.id, product.product_type.value)
    return product_to_dict(product)


@app.get("/products/{product_id}/form")
async def get_form(product_id: str):
    return {"product_id": product_id, "fields": quote_service.form_for(product_id)}


@app.post("/quote")
async def create_quote(req: QuoteRequest):
    context = OrderContext(
        quantity=req.quantity,
        requested_delivery_date=req.delivery_date,
        field_values=req.field_values,
    )
    quote = quote_service.quote(req.product_id, context)
    result = quote.to_dict()
    result["form"] = quote_service.form_for(req.product_id, quote.outcome)
    return result
