"""Application services: a supplier's own product catalog."""

from __future__ import annotations

from supplyhub.application.authorization import require_role
from supplyhub.domain.exceptions import EntityNotFoundError, UnauthorizedError, ValidationError
from supplyhub.domain.model.actor import Actor, Role
from supplyhub.domain.model.product import Product
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork


class AddProductHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        actor: Actor,
        name: str,
        price: str,
        sku: str = "",
        category: str = "",
        description: str = "",
    ) -> Product:
        """Add a product to the acting supplier's catalog."""
        require_role(actor, Role.SUPPLIER, "add products")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        money = Money.of(price)
        if not money.is_positive:
            raise ValidationError("Product price must be greater than zero")

        with self._uow:
            own = self._uow.products.list_by_supplier(actor.user_id)
            if any(p.name.lower() == name.strip().lower() for p in own):
                raise ValidationError(f"Product '{name}' already exists")

            # Auto-assign ID based on existing products
            numeric = [int(p.id[2:]) for p in self._uow.products.list_all() if p.id[2:].isdigit()]
            product = Product(
                id=f"P-{max(numeric, default=0) + 1}",
                name=name.strip(),
                price=money,
                supplier_id=actor.user_id,
                supplier_name=actor.name,
                sku=sku.strip(),
                category=category.strip(),
                description=description,
            )
            self._uow.products.save(product)
            self._uow.commit()
        return product


class UpdateProductPriceHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: Actor, product_id: str, new_price: str) -> Product:
        """Update a product's price.

        Existing orders and inventory rows keep the price they captured.
        """
        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
            if product.supplier_id != actor.user_id and not actor.is_admin:
                raise UnauthorizedError("You can only change your own products")
            product.update_price(Money.of(new_price))
            self._uow.products.save(product)
            self._uow.commit()
        return product


class ListProductsHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self, supplier_id: str | None = None) -> list[Product]:
        with self._uow:
            if supplier_id:
                products = self._uow.products.list_by_supplier(supplier_id)
            else:
                products = self._uow.products.list_all()
        return sorted(products, key=lambda p: p.name.lower())
