from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    debug: bool = False
    log_level: str = "INFO"

    # IRR solver (Newton-Raphson)
    irr_initial_guess: float = 0.1
    irr_max_iterations: int = 1000
    irr_tolerance: float = 1e-5

    # Sensitivity grid fan-out
    sensitivity_parallel: bool = True
    sensitivity_parallel_min_cells: int = 25  # Smaller grids run inline
    sensitivity_max_workers: int | None = None  # None: min(cpu_count, 8)


settings = Settings()
