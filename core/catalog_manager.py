"""Provider and model catalog management for Basma."""

from typing import Optional

from sqlmodel import select

from .database import get_session
from .models import LLMModel, Provider


class CatalogManager:
    """Manages provider and model CRUD operations."""

    def upsert_provider(
        self,
        name: str,
        display_name: Optional[str] = None,
        api_base_url: Optional[str] = None,
    ) -> Provider:
        """
        Create a provider or update the existing one with the same name.

        Fields passed as None keep their stored values on update.
        """
        name = name.strip().lower()
        with get_session() as db:
            provider = db.exec(select(Provider).where(Provider.name == name)).first()
            if provider is None:
                provider = Provider(
                    name=name,
                    display_name=display_name or name,
                    api_base_url=api_base_url,
                )
            else:
                if display_name:
                    provider.display_name = display_name
                if api_base_url is not None:
                    provider.api_base_url = api_base_url
            db.add(provider)
            db.commit()
            db.refresh(provider)
            db.expunge(provider)
            return provider

    def get_provider(self, name: str) -> Optional[Provider]:
        with get_session() as db:
            statement = select(Provider).where(Provider.name == name.strip().lower())
            result = db.exec(statement).first()
            if result:
                db.expunge(result)
            return result

    def list_providers(self) -> list[Provider]:
        with get_session() as db:
            results = db.exec(select(Provider).order_by(Provider.name)).all()
            for r in results:
                db.expunge(r)
            return list(results)

    def upsert_model(
        self,
        provider_name: str,
        name: str,
        display_name: Optional[str] = None,
        is_active: bool = True,
    ) -> LLMModel:
        """
        Create a model under a provider, or update it if it already exists.

        Raises ValueError if the provider is not in the catalog.
        """
        provider = self.get_provider(provider_name)
        if not provider:
            raise ValueError(f"Provider {provider_name} not found")

        with get_session() as db:
            statement = (
                select(LLMModel)
                .where(LLMModel.provider_id == provider.id)
                .where(LLMModel.name == name)
            )
            model = db.exec(statement).first()
            if model is None:
                model = LLMModel(
                    provider_id=provider.id,
                    name=name,
                    display_name=display_name or name,
                    is_active=is_active,
                )
            else:
                if display_name:
                    model.display_name = display_name
                model.is_active = is_active
            db.add(model)
            db.commit()
            db.refresh(model)
            db.expunge(model)
            return model

    def get_model(self, model_id: str) -> Optional[tuple[LLMModel, Provider]]:
        """Get a model together with its provider."""
        with get_session() as db:
            statement = (
                select(LLMModel, Provider)
                .join(Provider, LLMModel.provider_id == Provider.id)
                .where(LLMModel.id == model_id)
            )
            row = db.exec(statement).first()
            if not row:
                return None
            model, provider = row
            db.expunge(model)
            db.expunge(provider)
            return model, provider

    def list_models(self, active_only: bool = False) -> list[tuple[LLMModel, Provider]]:
        """List models with their providers, ordered by provider then name."""
        with get_session() as db:
            statement = (
                select(LLMModel, Provider)
                .join(Provider, LLMModel.provider_id == Provider.id)
                .order_by(Provider.name, LLMModel.name)
            )
            if active_only:
                statement = statement.where(LLMModel.is_active == True)  # noqa: E712
            rows = db.exec(statement).all()
            results = []
            for model, provider in rows:
                db.expunge(model)
                if provider in db:
                    db.expunge(provider)
                results.append((model, provider))
            return results

    def set_model_active(self, model_id: str, is_active: bool) -> Optional[LLMModel]:
        """Activate or deactivate a model. Returns None if not found."""
        with get_session() as db:
            model = db.exec(select(LLMModel).where(LLMModel.id == model_id)).first()
            if not model:
                return None

            model.is_active = is_active
            db.add(model)
            db.commit()
            db.refresh(model)
            db.expunge(model)
            return model
