"""Dependency container wiring for the application."""

import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from smart_chef.adapters.dummyjson_client import HttpxDummyJsonClient
from smart_chef.adapters.gemini_client import HttpxGeminiClient
from smart_chef.adapters.nutritionix_client import HttpxNutritionixClient
from smart_chef.adapters.openai_text_client import OpenAITextClient
from smart_chef.adapters.supabase_app_log_repository import SupabaseAppLogRepository
from smart_chef.adapters.supabase_user_repository import SupabaseUserRepository
from smart_chef.config import (
    Settings,
    resolve_gemini_base_url,
    resolve_gemini_project_id,
)
from smart_chef.services.ai_ideas import AiIdeaGenerator
from smart_chef.services.app_log import AppLogService
from smart_chef.services.composer import (
    ChefMealTemplate,
    MealComposer,
    SimpleMealTemplate,
)
from smart_chef.services.generation import (
    ChefMealGenerator,
    MealGenerationMode,
    MealGenerationService,
    SimpleMealGenerator,
)
from smart_chef.services.nutrition import FallbackEstimator, NutritionResolver
from smart_chef.services.scaling import ScalingBounds
from smart_chef.services.users import UserService

_logger = logging.getLogger(__name__)

DEMO_ESTIMATOR = FallbackEstimator(base_calories=120, spread=150)
REAL_ESTIMATOR = FallbackEstimator(base_calories=90, spread=120)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    app_log: AppLogService
    user_service: UserService
    meal_generation_service: MealGenerationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    app_log = AppLogService(SupabaseAppLogRepository(supabase_client))
    user_service = UserService(SupabaseUserRepository(supabase_client))

    demo_client = HttpxDummyJsonClient.create(
        base_url=resolved_settings.demo_nutrition_base_url,
        timeout_seconds=resolved_settings.nutrition_timeout_seconds,
    )
    demo_resolver = NutritionResolver(
        source=demo_client,
        app_log=app_log,
        estimator=DEMO_ESTIMATOR,
    )
    closers: list[Callable[[], Awaitable[None]]] = [demo_client.close]

    chef_resolver = demo_resolver
    if resolved_settings.nutrition_use_real_api:
        real_client = HttpxNutritionixClient.create(
            base_url=resolved_settings.nutrition_base_url,
            endpoint=resolved_settings.nutrition_endpoint,
            app_id_header=resolved_settings.nutrition_app_id_header,
            app_id=resolved_settings.nutrition_app_id,
            api_key_header=resolved_settings.nutrition_api_key_header,
            api_key=resolved_settings.nutrition_api_key,
            bearer_token=resolved_settings.nutrition_bearer_token,
            timeout_seconds=resolved_settings.nutrition_timeout_seconds,
        )
        chef_resolver = NutritionResolver(
            source=real_client,
            app_log=app_log,
            estimator=REAL_ESTIMATOR,
            fallback_on_error=resolved_settings.nutrition_use_mock_fallback,
            scale_live_results=False,
            source_label="Real nutrition API",
        )
        closers.append(real_client.close)

    ai_client = build_ai_client(resolved_settings)
    if ai_client is not None:
        closers.append(ai_client.close)
    idea_generator = AiIdeaGenerator(
        client=ai_client,
        app_log=app_log,
        enabled=resolved_settings.ai_enabled,
        temperature=resolved_settings.ai_temperature,
        max_output_tokens=resolved_settings.ai_max_output_tokens,
    )

    rng = random.Random()
    generators = {
        MealGenerationMode.SIMPLE: SimpleMealGenerator(
            resolver=demo_resolver,
            composer=MealComposer(SimpleMealTemplate(rng=rng)),
            bounds=ScalingBounds.of(
                resolved_settings.simple_scale_min, resolved_settings.simple_scale_max
            ),
            rng=rng,
            add_complements=resolved_settings.simple_add_complements,
        ),
        MealGenerationMode.CHEF: ChefMealGenerator(
            resolver=chef_resolver,
            composer=MealComposer(ChefMealTemplate()),
            idea_generator=idea_generator,
            bounds=ScalingBounds.of(
                resolved_settings.chef_scale_min, resolved_settings.chef_scale_max
            ),
        ),
    }
    meal_generation_service = MealGenerationService(
        generators=generators,
        user_service=user_service,
        app_log=app_log,
    )

    async def close_resources() -> None:
        for close in closers:
            await close()

    return AppContainer(
        settings=resolved_settings,
        app_log=app_log,
        user_service=user_service,
        meal_generation_service=meal_generation_service,
        close_resources=close_resources,
    )


def build_ai_client(
    settings: Settings,
) -> HttpxGeminiClient | OpenAITextClient | None:
    """Create the configured AI text client, or None when it cannot be used."""
    if not settings.ai_enabled:
        return None
    if settings.ai_provider == "openai":
        if not settings.openai_api_key:
            _logger.warning("AI enabled but OPENAI_API_KEY is not set")
            return None
        return OpenAITextClient.create(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.ai_timeout_seconds,
        )

    project_id = resolve_gemini_project_id(settings)
    if project_id is None:
        _logger.warning("AI enabled but no Gemini project id is configured")
        return None
    if not (settings.gemini_access_token or settings.gemini_api_key):
        _logger.warning("AI enabled but no Gemini credentials are configured")
        return None
    return HttpxGeminiClient.create(
        base_url=resolve_gemini_base_url(settings),
        project_id=project_id,
        location=settings.gemini_location,
        model=settings.gemini_model,
        access_token=settings.gemini_access_token,
        api_key=settings.gemini_api_key,
        timeout_seconds=settings.ai_timeout_seconds,
    )
