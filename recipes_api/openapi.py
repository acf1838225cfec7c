"""OpenAPI description of the recipes endpoints, served at ``/swagger.json``."""

from typing import Any, Dict

_RECIPE_REF = {"$ref": "#/components/schemas/Recipe"}
_ERROR_REF = {"$ref": "#/components/schemas/Error"}
_ID_PARAMETER = {
    "name": "id",
    "in": "path",
    "required": True,
    "description": "Recipe ID",
    "schema": {"type": "string"},
}


def _json(schema: Dict[str, Any], description: str) -> Dict[str, Any]:
    return {"description": description, "content": {"application/json": {"schema": schema}}}


def _string_array() -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}}


OPENAPI_DOCUMENT: Dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Recipe API", "version": "1.0", "description": "This is a Recipe API"},
    "paths": {
        "/recipes": {
            "get": {
                "tags": ["recipes"],
                "summary": "Lists all the recipes",
                "responses": {"200": _json({"type": "array", "items": _RECIPE_REF}, "OK")},
            },
            "post": {
                "tags": ["recipes"],
                "summary": "Creates a new recipe",
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": _RECIPE_REF}},
                },
                "responses": {
                    "200": _json(_RECIPE_REF, "The created recipe"),
                    "400": _json(_ERROR_REF, "Invalid input"),
                },
            },
        },
        "/recipes/search": {
            "get": {
                "tags": ["recipes"],
                "summary": "Search recipes by tag",
                "parameters": [
                    {
                        "name": "tag",
                        "in": "query",
                        "required": True,
                        "description": "Tag to search recipes, compared case-insensitively",
                        "schema": {"type": "string"},
                    }
                ],
                "responses": {"200": _json({"type": "array", "items": _RECIPE_REF}, "Matching recipes")},
            }
        },
        "/recipes/{id}": {
            "get": {
                "tags": ["recipes"],
                "summary": "Show a recipe",
                "parameters": [_ID_PARAMETER],
                "responses": {
                    "200": _json(_RECIPE_REF, "OK"),
                    "404": _json(_ERROR_REF, "Recipe not found"),
                },
            },
            "put": {
                "tags": ["recipes"],
                "summary": "Update a recipe",
                "parameters": [_ID_PARAMETER],
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": _RECIPE_REF}},
                },
                "responses": {
                    "200": _json(_RECIPE_REF, "The updated recipe"),
                    "400": _json(_ERROR_REF, "Invalid input"),
                    "404": _json(_ERROR_REF, "Recipe not found"),
                },
            },
            "delete": {
                "tags": ["recipes"],
                "summary": "Deletes a recipe",
                "parameters": [_ID_PARAMETER],
                "responses": {
                    "200": _json(
                        {"type": "object", "properties": {"message": {"type": "string"}}},
                        "Deleted successfully",
                    ),
                    "404": _json(_ERROR_REF, "Recipe not found"),
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Recipe": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "id": {"type": "string", "readOnly": True},
                    "name": {"type": "string"},
                    "tags": _string_array(),
                    "ingredients": _string_array(),
                    "instructions": _string_array(),
                    "publishedAt": {"type": "string", "format": "date-time", "readOnly": True},
                },
            },
            "Error": {"type": "object", "properties": {"error": {"type": "string"}}},
        }
    },
}


__all__ = ["OPENAPI_DOCUMENT"]
