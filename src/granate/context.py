from dataclasses import dataclass, field
from typing import Any

from faker import Faker

from granate.config import GranateConfig


def create_faker(config: GranateConfig) -> Faker:
    faker = Faker(config.locale) if config.locale else Faker()
    if config.seed is not None:
        faker.seed_instance(config.seed)
    return faker


@dataclass
class OperationContext:
    """State owned by a single schema build and the query execution that follows it.

    An instance is passed to every annotation ``apply`` and is the ``context_value``
    of the execution, so resolvers reach it as ``info.context``. Request defaults,
    the request coalescing loader and the HTTP session live here and never outlive
    the operation.

    Attributes:
        config: Settings of the operation.
        values: Caller supplied context values, available to custom resolvers.
        request_defaults: REST request defaults keyed by type name.
        loader: Request coalescing loader, created on first REST field access.
        http_session: HTTP session shared by the REST requests of the operation.
        faker: Data source of the mock generators.
    """

    config: GranateConfig = field(default_factory=GranateConfig)
    values: dict[str, Any] = field(default_factory=dict)
    request_defaults: dict[str, Any] = field(default_factory=dict)
    loader: Any = None
    http_session: Any = None
    faker: Faker = field(init=False)

    def __post_init__(self) -> None:
        self.faker = create_faker(self.config)

    async def aclose(self) -> None:
        """Release the HTTP session of the operation, if one was opened."""
        if self.http_session is not None:
            await self.http_session.aclose()
            self.http_session = None
