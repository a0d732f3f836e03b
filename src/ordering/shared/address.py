"""Address value object shared by distributors and orders."""

from protean.fields import String

from ordering.domain import ordering


@ordering.value_object
class Address:
    """A postal address.

    Distributors publish one as their pickup point; orders carry one as the
    delivery address, which may be copied from the distributor when the
    shipping method does not deliver.
    """

    firstname = String(max_length=100)
    lastname = String(max_length=100)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
