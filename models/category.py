from dataclasses import dataclass


@dataclass
class Category:
    id: str
    name: str
    icon: str = "Tag"
    color: str = "#888888"
