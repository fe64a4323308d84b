import unittest
from types import SimpleNamespace
from unittest import mock

from fridge.services.ai_recipe import (
    AiRecipeError,
    AiRecipeNotReady,
    AiRecipeService,
    build_prompt,
    format_ingredient,
)


def fake_openai(content, model="gpt-4o-mini"):
    choices = [SimpleNamespace(message=SimpleNamespace(content=content))] if content is not None else []
    create = mock.AsyncMock(return_value=SimpleNamespace(choices=choices, model=model))
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


class TestPrompt(unittest.TestCase):

    def test_format_ingredient(self):
        self.assertEqual(format_ingredient("whole_wheat-flour"), "Whole Wheat Flour")
        self.assertEqual(format_ingredient("  EGG "), "Egg")
        self.assertEqual(format_ingredient("__"), "")

    def test_prompt_lists_ingredients(self):
        prompt = build_prompt(["Egg", "Spinach"])
        self.assertIn("Egg, Spinach", prompt)
        self.assertIn("Markdown", prompt)


class TestAiRecipeService(unittest.IsolatedAsyncioTestCase):

    async def test_missing_key_is_not_ready(self):
        with self.assertRaises(AiRecipeNotReady):
            await AiRecipeService(api_key="").generate_recipe(["egg"])

    async def test_generates_recipe(self):
        client = fake_openai("  ## Spinach Omelette\n### Steps\n1. Whisk.  ")
        service = AiRecipeService(api_key="", model="test-model", client=client)
        data = await service.generate_recipe(["egg", "baby_spinach"])

        self.assertEqual(data.ingredients, ["Egg", "Baby Spinach"])
        self.assertEqual(data.recipe, "## Spinach Omelette\n### Steps\n1. Whisk.")
        self.assertEqual(data.model, "gpt-4o-mini")
        self.assertIn("Egg, Baby Spinach", data.prompt)

        kwargs = client.chat.completions.create.await_args.kwargs
        self.assertEqual(kwargs["model"], "test-model")
        self.assertEqual(kwargs["messages"], [{"role": "user", "content": data.prompt}])

    async def test_blank_names_dropped(self):
        data = await AiRecipeService(client=fake_openai("## Toast")).generate_recipe(["bread", "--"])
        self.assertEqual(data.ingredients, ["Bread"])

    async def test_empty_reply_is_error(self):
        for content in (None, "", "   "):
            with self.assertRaises(AiRecipeError):
                await AiRecipeService(client=fake_openai(content)).generate_recipe(["egg"])


if __name__ == "__main__":
    unittest.main()
