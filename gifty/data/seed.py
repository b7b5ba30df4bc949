# gifty/data/seed.py
import os
from decimal import Decimal

from gifty.data.database import Base, SessionLocal, engine
from gifty.data.models import GiftBoxModel, ProductModel, ReadyBoxItemModel, ReadyBoxModel, UserModel
from gifty.domain.pricing import order_total
from gifty.utils.logging import get_logger
from gifty.utils.security import hash_password

logger = get_logger(__name__)

PRODUCTS = [
    # graduation
    ("Graduation Cap Gift Box", "Elegant gift box with a graduation cap theme, perfect for new graduates.", "49.99", "graduation", 25),
    ("Scholar's Pen Set", "Premium fountain pen set in a velvet-lined box.", "34.99", "graduation", 40),
    ("Future is Bright Hamper", "Motivational book, gourmet chocolates, and a personalized keychain.", "59.99", "graduation", 15),
    ("Diploma Frame Deluxe", "Handcrafted wooden diploma frame with gold accents.", "39.99", "graduation", 30),
    # wedding
    ("Luxury Couple's Spa Set", "Aromatic candles, bath bombs, and essential oils for the newlyweds.", "89.99", "wedding", 20),
    ("Crystal Wine Glass Pair", "Hand-blown crystal wine glasses engraved with initials.", "74.99", "wedding", 18),
    ("Love Story Photo Album", "Leather-bound photo album with 100 archival-quality pages.", "54.99", "wedding", 22),
    ("Golden Anniversary Clock", "Mantel clock with a golden finish.", "119.99", "wedding", 10),
    # birthday
    ("Birthday Surprise Box", "Confetti, party hat, chocolates, and a surprise toy inside a colorful box.", "29.99", "birthday", 50),
    ("Gourmet Cake Hamper", "Artisan mini-cakes, macarons, and a birthday candle set.", "44.99", "birthday", 35),
    ("Personalized Star Map", "A framed star map of the night sky on the date of their birth.", "64.99", "birthday", 20),
    ("Retro Polaroid Gift Kit", "Instant camera, film pack, and a scrapbook.", "79.99", "birthday", 12),
    # general
    ("Cozy Comfort Blanket Set", "Fleece blanket with matching cushion in a gift bag.", "42.99", "general", 30),
    ("Aromatherapy Candle Trio", "Three hand-poured soy candles: lavender, vanilla, rosemary.", "27.99", "general", 45),
    ("Succulent Garden Kit", "DIY mini succulent garden with ceramic pots.", "35.99", "general", 28),
    ("Premium Tea Collection", "12 teas from around the world in a wooden box.", "38.99", "general", 33),
]

GIFT_BOXES = [
    ("Small Box", "minimal", 3, "5"),
    ("Medium Box", "classic", 5, "10"),
    ("Large Box", "luxury", 8, "18"),
    ("Premium Box", "premium", 12, "30"),
    ("Kids Box", "fun", 5, "8"),
    ("Romantic Box", "romantic", 6, "15"),
]

# (name, description, gift box index, [(product index, qty)])
READY_BOXES = [
    ("Self-Care Starter", "A curated set of self-care essentials.", 1, [(0, 1), (1, 1), (2, 1)]),
    ("Luxury Pampering Set", "Premium products wrapped in an elegant luxury box.", 2, [(0, 2), (3, 1), (1, 1)]),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # not forcing: only seed an empty catalog
        if db.query(ProductModel).first():
            logger.info("Catalog already seeded, skipping")
            return

        products = [
            ProductModel(name=n, description=d, price=Decimal(p), category=c, stock=s)
            for n, d, p, c, s in PRODUCTS
        ]
        boxes = [
            GiftBoxModel(name=n, theme=t, max_items=m, base_price=Decimal(b))
            for n, t, m, b in GIFT_BOXES
        ]
        db.add_all(products + boxes)
        db.flush()

        for name, description, box_idx, lines in READY_BOXES:
            box = boxes[box_idx]
            db.add(
                ReadyBoxModel(
                    name=name,
                    description=description,
                    gift_box_id=box.id,
                    items=[ReadyBoxItemModel(product_id=products[i].id, quantity=q) for i, q in lines],
                    total_price=order_total(((products[i].price, q) for i, q in lines), box.base_price),
                )
            )

        admin_email = os.getenv("ADMIN_EMAIL")
        admin_password = os.getenv("ADMIN_PASSWORD")
        if admin_email and admin_password:
            db.add(
                UserModel(
                    name="Admin",
                    email=admin_email.lower(),
                    password=hash_password(admin_password),
                    role="admin",
                )
            )

        db.commit()
        logger.info(f"Seeded {len(products)} products, {len(boxes)} gift boxes, {len(READY_BOXES)} ready boxes")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
