from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "FINMATH_"}

    # Fractional digits kept by general decimal arithmetic
    decimal_scale: int = 10
    # Fractional digits kept by amortization / cash flow formulas
    financial_scale: int = 14

    # Significant digits used when a float is turned back into a decimal
    float_digits: int = 14
    # Working precision of the decimal context (must hold the largest finite float)
    working_digits: int = 400

    # Root finding
    max_iterations: int = 100
    accuracy: float = 1e-6

    # Display
    display_precision: int = 2

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
