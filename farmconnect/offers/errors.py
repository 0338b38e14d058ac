class OfferLifecycleError(Exception):
    pass


class CatalogStoreError(OfferLifecycleError):
    pass


class OfferWindowInvalidError(OfferLifecycleError):
    pass


class OfferProductNotFoundError(OfferLifecycleError):
    pass


class OfferRunInterruptedError(OfferLifecycleError):
    pass
