# Core application logic
from .models import EvaluationStatus, Provider, LLMModel, Evaluation, Fingerprint, PromptResponse
from .database import get_engine, init_db
from .prompt_chain import PromptChain, PromptTemplate, QUANTIZATION_CHAIN
from .prompt_builder import AnswerMap, SequentialPromptBuilder, build_final_sentence
from .fingerprint import StepResult, extract_answer, calculate_fingerprint
from .catalog_manager import CatalogManager
from .evaluation_store import EvaluationStore
from .model_resolver import ModelHandle, ModelResolver
from .evaluation_runner import EvaluationRunner, EvaluationSession
from .evaluation_manager import EvaluationManager
from .stability import StabilityManager

__all__ = [
    "EvaluationStatus",
    "Provider",
    "LLMModel",
    "Evaluation",
    "Fingerprint",
    "PromptResponse",
    "get_engine",
    "init_db",
    "PromptChain",
    "PromptTemplate",
    "QUANTIZATION_CHAIN",
    "AnswerMap",
    "SequentialPromptBuilder",
    "build_final_sentence",
    "StepResult",
    "extract_answer",
    "calculate_fingerprint",
    "CatalogManager",
    "EvaluationStore",
    "ModelHandle",
    "ModelResolver",
    "EvaluationRunner",
    "EvaluationSession",
    "EvaluationManager",
    "StabilityManager",
]
