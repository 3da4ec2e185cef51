"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.analysis_service import AnalysisService
from domain.services.business_service import BusinessService
from domain.services.sub_area_service import SubAreaService
from domain.services.task_file_mapping_service import TaskFileMappingService
from domain.services.task_generation import ITaskGenerator
from infrastructure.ai.baseline_generator import BaselineTaskGenerator
from infrastructure.ai.http_generator import HTTPTaskGenerator
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_task_generator() -> ITaskGenerator | None:
    """The hosted AI function when configured, the baseline set in development."""
    if settings.task_generation_url:
        return HTTPTaskGenerator()
    if not settings.is_production:
        return BaselineTaskGenerator()
    return None


@lru_cache
def get_analysis_service() -> AnalysisService:
    """Get Analysis service instance."""
    return AnalysisService(
        get_uow_factory(),
        task_generator=get_task_generator(),
        strict_status_transitions=settings.strict_status_transitions,
        allow_test_data_reset=settings.enable_test_data_reset,
    )


@lru_cache
def get_business_service() -> BusinessService:
    """Get Business service instance."""
    return BusinessService(get_uow_factory())


@lru_cache
def get_sub_area_service() -> SubAreaService:
    """Get SubArea service instance."""
    return SubAreaService(get_uow_factory())


@lru_cache
def get_task_file_mapping_service() -> TaskFileMappingService:
    """Get TaskFileMapping service instance."""
    return TaskFileMappingService(get_uow_factory())
