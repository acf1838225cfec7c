import logging
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, render_template, request, url_for

from .memory_storage import InMemoryRecipeStorage
from .models import Recipe
from .openapi import OPENAPI_DOCUMENT
from .storage import InvalidRecipeError, RecipeInput, RecipeNotFoundError, RecipeRepository

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Recipe not found"


def create_app(storage: Optional[RecipeRepository] = None) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use an
        :class:`InMemoryRecipeStorage` seeded from the file named by the
        ``RECIPES_FILE`` environment variable.
    """

    app = Flask(__name__)
    app.json.sort_keys = False

    if storage is None:
        storage = InMemoryRecipeStorage.from_env()
    app.config["RECIPE_STORAGE"] = storage

    @app.post("/recipes")
    def create_recipe() -> Tuple[Response, int]:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        try:
            recipe_input = _recipe_input_from_request()
            recipe = storage_backend.add_recipe(
                name=recipe_input.name,
                tags=recipe_input.tags,
                ingredients=recipe_input.ingredients,
                instructions=recipe_input.instructions,
            )
        except InvalidRecipeError as exc:
            return jsonify(error=str(exc)), 400

        logger.info("Recipe '%s' saved as %s", recipe.name, recipe.id)
        return jsonify(recipe.to_dict()), 200

    @app.get("/recipes")
    def list_recipes() -> Tuple[Response, int]:
        recipes = app.config["RECIPE_STORAGE"].list_recipes()
        return jsonify([recipe.to_dict() for recipe in recipes]), 200

    @app.get("/recipes/search")
    def search_recipes() -> Tuple[Response, int]:
        tag = request.args.get("tag", "")
        recipes = app.config["RECIPE_STORAGE"].search_recipes(tag)
        return jsonify([recipe.to_dict() for recipe in recipes]), 200

    @app.get("/recipes/<recipe_id>")
    def show_recipe(recipe_id: str) -> Tuple[Response, int]:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        try:
            recipe = storage_backend.get_recipe(recipe_id)
        except RecipeNotFoundError:
            return jsonify(error=NOT_FOUND_MESSAGE), 404

        return jsonify(recipe.to_dict()), 200

    @app.put("/recipes/<recipe_id>")
    def update_recipe(recipe_id: str) -> Tuple[Response, int]:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        try:
            recipe_input = _recipe_input_from_request()
            recipe = storage_backend.update_recipe(
                recipe_id,
                name=recipe_input.name,
                tags=recipe_input.tags,
                ingredients=recipe_input.ingredients,
                instructions=recipe_input.instructions,
            )
        except InvalidRecipeError as exc:
            return jsonify(error=str(exc)), 400
        except RecipeNotFoundError:
            return jsonify(error=NOT_FOUND_MESSAGE), 404

        logger.info("Recipe %s updated", recipe_id)
        return jsonify(recipe.to_dict()), 200

    @app.delete("/recipes/<recipe_id>")
    def delete_recipe(recipe_id: str) -> Tuple[Response, int]:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        try:
            storage_backend.delete_recipe(recipe_id)
        except RecipeNotFoundError:
            return jsonify(error=NOT_FOUND_MESSAGE), 404

        logger.info("Recipe %s deleted", recipe_id)
        return jsonify(message="Recipe has been deleted"), 200

    @app.get("/swagger.json")
    def openapi_document() -> Response:
        return jsonify(OPENAPI_DOCUMENT)

    @app.get("/swagger/")
    def swagger_ui() -> str:
        return render_template(
            "swagger.html",
            spec_url=url_for("openapi_document"),
            title=OPENAPI_DOCUMENT["info"]["title"],
        )

    return app


def _recipe_input_from_request() -> RecipeInput:
    # Decoded regardless of Content-Type; only unparseable bodies are rejected.
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        raise InvalidRecipeError("Request body must be valid JSON.")
    return RecipeInput.from_json(payload)


__all__ = ["create_app", "Recipe"]
