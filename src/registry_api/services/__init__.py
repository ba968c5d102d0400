from .index_service import IndexService
from .owners_service import OwnersService
from .publish_service import PublishService
from .registry import RegistryServices
from .tokens_service import TokensService
from .yank_service import YankService

__all__ = [
    "IndexService",
    "OwnersService",
    "PublishService",
    "RegistryServices",
    "TokensService",
    "YankService",
]
