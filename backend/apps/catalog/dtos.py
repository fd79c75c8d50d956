from dataclasses import dataclass


@dataclass
class ProductDTO:
    id: int
    title: str
    price: str
    image: str
