"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from smart_chef.api.models import GeneratedMealResponse, MealGenerationPayload
from smart_chef.app_logging import configure_logging
from smart_chef.config import mode_warnings
from smart_chef.containers import AppContainer
from smart_chef.services.generation import MealGenerationMode
from smart_chef.services.ingredients import IngredientValidationError
from smart_chef.services.nutrition import NutritionLookupError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meals/generate")
    async def generate_meal(
        payload: MealGenerationPayload, request: Request, mode: str = "simple"
    ) -> GeneratedMealResponse:
        """Generate a meal from the submitted ingredients."""
        state_container: AppContainer = request.app.state.container
        generation_mode = MealGenerationMode.parse(mode)
        try:
            meal = await state_container.meal_generation_service.generate(
                [ingredient.to_domain() for ingredient in payload.ingredients],
                mode=generation_mode,
                calorie_target=payload.calorie_target,
                use_user_calorie_target=payload.use_user_calorie_target,
                user_id=payload.user_id,
            )
        except IngredientValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        except NutritionLookupError as exc:
            logger.warning("Nutrition lookup failed: %s", exc)
            state_container.app_log.error(str(exc))
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc

        warnings: list[str] = []
        if generation_mode is MealGenerationMode.CHEF:
            warnings = mode_warnings(state_container.settings)
        return GeneratedMealResponse.from_meal(
            meal, mode=generation_mode.value, warnings=warnings
        )

    return app
