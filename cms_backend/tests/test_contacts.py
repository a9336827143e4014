import unittest

from cms_backend.contacts import (
    DEFAULT_BUSINESS_HOURS,
    ContactInfoRepository,
    MessageRepository,
)
from cms_backend.errors import NotFoundError, ValidationError
from cms_backend.store import InMemoryCollectionStore


class ContactInfoRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = InMemoryCollectionStore()
        self.contacts = ContactInfoRepository(self.store)

    async def test_default_is_persisted_on_first_read(self):
        info = await self.contacts.get()
        self.assertEqual(info["business_hours"], DEFAULT_BUSINESS_HOURS)
        self.assertEqual(self.store.peek("contacts"), info)

    async def test_replace_fills_defaults(self):
        info = await self.contacts.replace(
            {"email": "oi@example.com", "phone": "123", "address": "Rua A"}
        )
        self.assertEqual(info["business_hours"], DEFAULT_BUSINESS_HOURS)
        self.assertEqual(info["social_media"], {})
        self.assertEqual(await self.contacts.get(), info)

    async def test_replace_requires_fields(self):
        with self.assertRaises(ValidationError):
            await self.contacts.replace({"email": "oi@example.com", "phone": "123"})


class MessageRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = InMemoryCollectionStore()
        self.messages = MessageRepository(self.store)

    async def submit(self, **overrides):
        fields = {"name": "Ana", "email": "ana@example.com", "message": "Olá"}
        fields.update(overrides)
        return await self.messages.submit(fields)

    async def test_submit(self):
        message = await self.submit()
        self.assertEqual(message["id"], 1)
        self.assertFalse(message["read"])
        self.assertFalse(message["responded"])
        self.assertTrue(message["sent_at"].endswith("Z"))

    async def test_submit_rejects_bad_email(self):
        with self.assertRaises(ValidationError) as ctx:
            await self.submit(email="ana@example")
        self.assertEqual(ctx.exception.message, "Formato de email inválido")

    async def test_mark_only_applies_booleans(self):
        message = await self.submit()
        marked = await self.messages.mark(message["id"], read=True)
        self.assertTrue(marked["read"])
        self.assertFalse(marked["responded"])
        self.assertIn("updated_at", marked)

        marked = await self.messages.mark(message["id"], responded=True)
        self.assertTrue(marked["read"])
        self.assertTrue(marked["responded"])

    async def test_delete_frees_top_id(self):
        await self.submit()
        second = await self.submit()
        removed = await self.messages.delete(second["id"])
        self.assertEqual(removed["id"], 2)

        third = await self.submit()
        self.assertEqual(third["id"], 2)

    async def test_delete_missing(self):
        with self.assertRaises(NotFoundError):
            await self.messages.delete(3)

    async def test_list_newest_first(self):
        self.store.seed(
            "messages",
            [
                {"id": 1, "sent_at": "2025-01-01T00:00:00.000Z"},
                {"id": 2, "sent_at": "2025-03-01T00:00:00.000Z"},
            ],
        )
        listed = await self.messages.list_all()
        self.assertEqual([m["id"] for m in listed], [2, 1])


if __name__ == "__main__":
    unittest.main()
