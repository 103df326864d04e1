from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    ledger_network: str = "docprov-simulated"
    ledger_initial_sequence: int = 1_000_000
    ledger_duplicate_policy: str = "reject"

    storage_primary_backend: str = "ipfs"
    storage_secondary_backend: str = "s3"
    storage_max_workers: int = 4
    storage_delete_wait_seconds: float = 30.0

    ipfs_api_url: str = "http://localhost:5001"
    ipfs_timeout_seconds: float = 10.0

    s3_bucket: str = "docprov-documents"
    s3_region: str = "me-south-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    s3_timeout_seconds: int = 5

    pdf_engine: str = "pdfplumber"
    pdf_baseline_score: float = 95.0
    pdf_severity_weights: dict[str, float] = {"high": 15.0, "medium": 8.0, "low": 3.0}
    pdf_min_text_length: int = 50

    image_baseline_score: float = 92.0
    image_severity_weights: dict[str, float] = {"high": 20.0, "medium": 10.0, "low": 4.0}
    edge_suspicion_threshold: float = 0.6
    max_font_count: int = 2
    compression_quality_threshold: int = 80

    suspicious_tools: list[str] = ["photoshop", "gimp"]

    ocr_engine: str = "tesseract"
    ocr_languages: str = "ara+eng"
    ocr_timeout_seconds: int = 30

    signal_provider: str = "simulated"
    signal_seed: int | None = None
    static_confirmations: int = 12
    static_edge_suspicion: float = 0.0
    static_font_count: int = 1
    static_recompression_likelihood: float = 0.0

    classifier_loader: str = "torchscript"
    classifier_model_name: str = "forgery-detector-v3"
    classifier_models_dir: str = "models"
    classifier_input_size: int = 224
    classifier_flags: dict[str, float] = {
        "font_mismatch": 0.5,
        "metadata_tampering": 0.6,
        "photo_editing": 0.7,
        "copy_move_regions": 0.8,
    }
    model_failure_backoff_seconds: float = 300.0

    analysis_workers: int | None = None
    analysis_timeout_seconds: float = 120.0

    decision_score_threshold: float = 85.0
    decision_confidence_threshold: float = 0.9
