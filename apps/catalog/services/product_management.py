"""Product management service."""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q, ProtectedError

from apps.catalog.models import Product, ProductVariation
from .exceptions import (
    ProductValidationError,
    DuplicateProductCodeError,
    ProductInUseError,
)

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2

_PRODUCT_FIELDS = (
    'code', 'name', 'description', 'price', 'cost_price',
    'barcode', 'category', 'supplier', 'gender', 'is_active',
)


def _clean_variations(variations):
    """
    Normalize variations and reject blank or duplicate color/size pairs.

    Returns a list of (color, size) tuples in input order.
    """
    cleaned = []
    seen = set()
    for index, variation in enumerate(variations, start=1):
        color = (variation.get('color') or '').strip()
        size = (variation.get('size') or '').strip()
        if not color:
            raise ProductValidationError(f"Variation {index}: color is required")
        if not size:
            raise ProductValidationError(f"Variation {index}: size is required")
        key = (color.lower(), size.lower())
        if key in seen:
            raise ProductValidationError(f"Duplicate variation: {color} / {size}")
        seen.add(key)
        cleaned.append((color, size))
    return cleaned


def _check_code_available(code, exclude_id=None):
    queryset = Product.objects.filter(code__iexact=code)
    if exclude_id is not None:
        queryset = queryset.exclude(id=exclude_id)
    if queryset.exists():
        raise DuplicateProductCodeError(f"Product code '{code}' is already in use")


@transaction.atomic
def create_product(*, variations=(), **data) -> Product:
    """
    Create a product with its color/size variations.

    Args:
        variations: Iterable of {'color': str, 'size': str}
        **data: Product fields; code, name, category and supplier are required

    Raises:
        ProductValidationError: Missing required data or bad variations
        DuplicateProductCodeError: Code already used
    """
    code = (data.get('code') or '').strip()
    name = (data.get('name') or '').strip()
    if not code or not name:
        raise ProductValidationError("Product code and name are required")
    if data.get('category') is None or data.get('supplier') is None:
        raise ProductValidationError("Product category and supplier are required")

    _check_code_available(code)
    cleaned = _clean_variations(variations)

    fields = {key: value for key, value in data.items() if key in _PRODUCT_FIELDS}
    fields.update(code=code, name=name)
    product = Product.objects.create(**fields)

    ProductVariation.objects.bulk_create([
        ProductVariation(product=product, color=color, size=size)
        for color, size in cleaned
    ])

    logger.info("Product %s created with %d variations", product.code, len(cleaned))
    return product


@transaction.atomic
def update_product(*, product_id, variations=None, **data) -> Product:
    """
    Update product fields. When ``variations`` is given it replaces the
    product's variation set.
    """
    product = Product.objects.select_for_update().get(id=product_id)

    if 'code' in data:
        data['code'] = (data['code'] or '').strip()
        if not data['code']:
            raise ProductValidationError("Product code is required")
        _check_code_available(data['code'], exclude_id=product.id)
    if 'name' in data and not (data['name'] or '').strip():
        raise ProductValidationError("Product name is required")
    for required in ('category', 'supplier'):
        if required in data and data[required] is None:
            raise ProductValidationError(f"Product {required} is required")

    for key, value in data.items():
        if key in _PRODUCT_FIELDS:
            setattr(product, key, value)
    product.save()

    if variations is not None:
        cleaned = _clean_variations(variations)
        product.variations.all().delete()
        ProductVariation.objects.bulk_create([
            ProductVariation(product=product, color=color, size=size)
            for color, size in cleaned
        ])

    return product


@transaction.atomic
def delete_product(*, product_id) -> None:
    """Delete a product that has no stock left in any store."""
    product = Product.objects.select_for_update().get(id=product_id)

    if product.inventory_lines.filter(quantity__gt=0).exists():
        raise ProductInUseError(
            f"Product {product.code} still has stock and cannot be deleted"
        )

    try:
        product.inventory_lines.all().delete()
        product.delete()
    except ProtectedError:
        raise ProductInUseError(
            f"Product {product.code} is referenced by purchases or sales; deactivate it instead"
        )

    logger.info("Product %s deleted", product.code)


def search_products(term: Optional[str], limit: int = 20, active_only: bool = True):
    """
    Case-insensitive substring search over product name and code.

    Terms shorter than two characters return an empty queryset.
    """
    term = (term or '').strip()
    if len(term) < MIN_SEARCH_LENGTH:
        return Product.objects.none()

    queryset = Product.objects.filter(Q(name__icontains=term) | Q(code__icontains=term))
    if active_only:
        queryset = queryset.filter(is_active=True)
    return queryset.select_related('category', 'supplier').prefetch_related('variations')[:limit]
