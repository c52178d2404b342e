"""
Product service for catalog CRUD operations.

The products table has a unique constraint on article. A unique violation
from the database is reported as ProductArticleExistsError.
"""

from typing import Optional
import structlog

from config import get_supabase_client, settings
from models.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    SortField,
    SortOrder,
)
from exceptions import (
    ProductNotFoundError,
    ProductArticleExistsError,
    DatabaseError
)

logger = structlog.get_logger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: Exception) -> bool:
    """Check whether a PostgREST error is a unique constraint violation."""
    if getattr(error, "code", None) == UNIQUE_VIOLATION:
        return True
    return "duplicate key" in str(error).lower()


def _ilike_pattern(text: str) -> str:
    """Substring pattern for ilike; strips characters PostgREST filters reserve."""
    cleaned = text.translate({ord(c): None for c in ',()"'})
    return f"%{cleaned}%"


class ProductService:
    """
    Product business logic.

    Handles CRUD operations for products.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = settings.products_table

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        sort_by: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC
    ) -> list[ProductResponse]:
        """
        Get all products, newest first by default.

        Args:
            sort_by: Column to order by
            sort_order: ASC or DESC

        Returns:
            List of products
        """
        return self.find_with_filters(sort_by=sort_by, sort_order=sort_order)

    def find_with_filters(
        self,
        search: Optional[str] = None,
        brand: Optional[str] = None,
        sort_by: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC
    ) -> list[ProductResponse]:
        """
        Search products.

        Args:
            search: Case-insensitive substring of name, article or brand
            brand: Case-insensitive substring of brand
            sort_by: Column to order by
            sort_order: ASC or DESC

        Returns:
            Matching products in the requested order
        """
        logger.info(
            "getting_products",
            search=search,
            brand=brand,
            sort_by=sort_by.value,
            sort_order=sort_order.value
        )

        try:
            query = self.db.table(self.table).select("*")

            if search:
                pattern = _ilike_pattern(search)
                query = query.or_(
                    f"name.ilike.{pattern},"
                    f"article.ilike.{pattern},"
                    f"brand.ilike.{pattern}"
                )
            if brand:
                query = query.ilike("brand", _ilike_pattern(brand))

            query = query.order(sort_by.column, desc=sort_order == SortOrder.DESC)

            result = query.execute()

            products = [ProductResponse(**row) for row in result.data]

            logger.info("products_retrieved", count=len(products))

            return products

        except Exception as e:
            logger.error("get_products_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, product_id: int) -> ProductResponse:
        """
        Get a single product by ID.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.debug("getting_product", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            logger.error(
                "get_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

        if not result.data:
            raise ProductNotFoundError(product_id)

        return ProductResponse(**result.data[0])

    def get_by_article(self, article: str) -> Optional[ProductResponse]:
        """
        Get a product by article.

        Args:
            article: Exact article, as stored

        Returns:
            ProductResponse or None if not found
        """
        logger.debug("getting_product_by_article", article=article)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("article", article)
                .limit(1)
                .execute()
            )

            if not result.data:
                return None

            return ProductResponse(**result.data[0])

        except Exception as e:
            logger.error(
                "get_product_by_article_failed",
                article=article,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def get_brands(self) -> list[str]:
        """
        Distinct non-empty brands, alphabetical.

        Reads the whole brand column and de-duplicates in Python; PostgREST
        has no DISTINCT select.
        """
        try:
            result = self.db.table(self.table).select("brand").execute()
        except Exception as e:
            logger.error("get_brands_failed", error=str(e))
            raise DatabaseError("select", str(e))

        return sorted({row["brand"] for row in result.data if row.get("brand")})

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: ProductCreate) -> ProductResponse:
        """
        Create a new product.

        Args:
            data: Product creation data

        Returns:
            Created ProductResponse

        Raises:
            ProductArticleExistsError: If the article is already taken
            DatabaseError: On any other database failure
        """
        logger.info("creating_product", article=data.article)

        try:
            result = (
                self.db.table(self.table)
                .insert(data.to_row())
                .execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                logger.warning("create_product_duplicate", article=data.article)
                raise ProductArticleExistsError(data.article)
            logger.error(
                "create_product_failed",
                article=data.article,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

        product = ProductResponse(**result.data[0])

        logger.info(
            "product_created",
            product_id=product.id,
            article=product.article
        )

        return product

    def update(self, product_id: int, data: ProductUpdate) -> ProductResponse:
        """
        Update an existing product.

        Args:
            product_id: Product ID
            data: Fields to update

        Returns:
            Updated ProductResponse

        Raises:
            ProductNotFoundError: If product doesn't exist
            ProductArticleExistsError: If new article already exists
        """
        logger.info("updating_product", product_id=product_id)

        existing = self.get_by_id(product_id)

        if data.article and data.article != existing.article:
            if self.get_by_article(data.article):
                raise ProductArticleExistsError(data.article)

        update_data = data.to_row()
        if not update_data:
            # Nothing to update, return existing
            return existing

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                raise ProductArticleExistsError(data.article)
            logger.error(
                "update_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("update", str(e))

        product = ProductResponse(**result.data[0])

        logger.info(
            "product_updated",
            product_id=product_id,
            fields=list(update_data.keys())
        )

        return product

    def delete(self, product_id: int) -> bool:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.info("deleting_product", product_id=product_id)

        self.get_by_id(product_id)

        try:
            self.db.table(self.table).delete().eq("id", product_id).execute()
        except Exception as e:
            logger.error(
                "delete_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("delete", str(e))

        logger.info("product_deleted", product_id=product_id)

        return True


# Singleton instance for convenience
_product_service: Optional[ProductService] = None

def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
