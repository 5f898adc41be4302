from .image import (
    ImageObject, RawImage, ImageRecord, UploadTransform, AssetMetadata, UploadResult,
    Base64ImageUpload, DestroyResult, DeletedAsset, FailedDeletion, DeleteBatchResult,
)
from .common import Pagination, Message
from .product import Product, ProductCreate, ProductUpdate, ProductPage, ProductMutationResult, ProductDeleteResult
from .admin import (
    AdminCreate, AdminLogin, AdminOut, LoginResponse, TokenPayload, CurrentUser,
    ForgotPasswordRequest, ResetPasswordRequest, SendOtpRequest, VerifyOtpRequest,
    VerifyOtpResetRequest, EmailAck, AdminStats,
)
from .user import UserRegister, UserOut, UserPage, UserBlockResult
from .order import Order, OrderItem, OrderStatusEnum, OrderStatusUpdate, OrderPage
from .payment import Payment, PaymentMethodEnum, PaymentStatusEnum, PaymentGatewayEnum, PaymentStatusUpdate, PaymentRefund, PaymentPage
from .dashboard import DashboardStats
