# catalog/services/get_products.py

"""Use case: load the current product list."""

from catalog.models.product import ProductRecord
from catalog.models.result import Result
from catalog.services.product_repository import ProductRepository


class GetProductsUseCase:
    """Pass-through entry point used by the CLI layer."""

    def __init__(self, repository: ProductRepository) -> None:
        self.repository = repository

    async def __call__(self) -> Result[list[ProductRecord]]:
        return await self.repository.get_products()
