from mangum import Mangum

from app_factory import AppConfig, create_app

config = AppConfig(
    title="Expenses API",
    description="In-memory expense list and create endpoint",
    version="1.0.0",
    root_message="Expenses API",
)
app = create_app(config)

handler = Mangum(app, lifespan="off")
