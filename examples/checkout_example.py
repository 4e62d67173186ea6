"""
Checkout — a guest walks the four steps, with the detours that happen.

Contact → Address → Delivery → Review → submit

Shows:
- guest registration blocked by the auth service, then fixed
- tax following the address country
- delivery options while offline, then "Try Again"
- a free-shipping coupon cleared by switching method
"""

from kungfu import Ok, Error

from tally import cart as CT
from tally import checkout as CO
from tally import display
from tally.config import Settings
from examples._infra import CART_ROWS, FlakyNetwork, banner, run, storefront


def show(checkout: CO.CheckoutController) -> None:
    p = checkout.pricing()
    print(
        f"  subtotal {display(p.subtotal)}  shipping {display(p.shipping_cost)}  "
        f"tax {display(p.tax)} ({p.tax_rate})  discount {display(p.discount)}  "
        f"total {display(p.total)}"
    )


def report(result: object) -> None:
    match result:
        case Ok(value):
            print(f"  ✓ {value}")
        case Error(e):
            print(f"  ✗ {e.message}")


async def main() -> None:
    settings = Settings()
    network = FlakyNetwork(online=False)
    services, orders, coupons = storefront(network)
    items = CT.line_items_from_cart(CART_ROWS)

    checkout = CO.CheckoutController(items, services, settings=settings)
    report(await checkout.load_tax_settings())

    banner("Step 1: Contact")
    checkout.update_contact(email="taken@example.com", phone="0244000000")
    checkout.request_account("secret1", "secret1", first_name="Ama", last_name="Mensah")
    report(await checkout.advance())
    checkout.update_contact(email="ama@example.com")
    report(await checkout.advance())

    banner("Step 2: Address")
    report(await checkout.update_address(address1="1 Oxford St", city="Accra", state="Greater Accra"))
    report(await checkout.advance())
    report(await checkout.update_address(zip_code="00233", country="Nigeria"))
    show(checkout)
    report(await checkout.advance())

    banner("Step 3: Delivery")
    delivery = checkout.session.delivery
    print(f"  status {delivery.status.name}: {delivery.message}")
    network.online = True
    report(await checkout.retry_delivery_options())
    for quote in checkout.session.delivery.offered:
        print(f"  {quote.method.display_name} via {quote.method.carrier}: "
              f"{display(quote.unit_price_total)}, {quote.estimated_delivery}")
    print(f"  not shippable: {', '.join(checkout.session.delivery.unshippable_items)}")

    report(checkout.select_method("sea"))
    report(await checkout.apply_coupon("FREESHIP"))
    show(checkout)
    report(checkout.select_method("air"))
    print(f"  coupon after switching: {checkout.session.coupon}")
    show(checkout)
    report(await checkout.advance())

    banner("Step 4: Review")
    report(await checkout.apply_coupon("BIG100"))
    report(await checkout.apply_coupon("WELCOME10"))
    show(checkout)

    match await checkout.submit():
        case Ok(draft):
            print(f"\n  Order {draft.order_number}: {display(draft.total)} "
                  f"({draft.shipping_method.display_name}, {draft.estimated_delivery_days} days)")
        case Error(e):
            print(f"\n  ✗ {e.message}")

    print(f"  stored drafts: {len(orders.drafts)}, coupon usage: {coupons.used}")


if __name__ == "__main__":
    run(main)
