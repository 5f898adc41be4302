from . import crud_admin as admin
from . import crud_user as user
from . import crud_product as product
from . import crud_order as order
from . import crud_payment as payment
