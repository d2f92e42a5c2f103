from .analyzer import analyze_intake
from .attachments import encode_attachment, ingest_paths, ingest_uploads, remove_attachment
from .llm import GatewayConfig, ModelGateway, extract_text, load_system_prompt
from .prompt import compose_prompt
from .segmenter import classify_verdict, sections_to_text, segment

__all__ = [
    "GatewayConfig",
    "ModelGateway",
    "analyze_intake",
    "classify_verdict",
    "compose_prompt",
    "encode_attachment",
    "extract_text",
    "ingest_paths",
    "ingest_uploads",
    "load_system_prompt",
    "remove_attachment",
    "sections_to_text",
    "segment",
]
