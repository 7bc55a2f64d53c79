# product_api/models.py
from pydantic import BaseModel
from typing import Optional, Union, Dict, Any

Price = Union[int, float]

# public name of the store identifier; "_id" is accepted as an alias
ID_FIELD = "id"
PRODUCT_FIELDS = ("name", "price", "category")


class NewProduct(BaseModel):
    name: str
    price: Price
    category: str


class ProductChanges(BaseModel):
    name: Optional[str] = None
    price: Optional[Price] = None
    category: Optional[str] = None

    def as_update(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
