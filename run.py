import argparse, datetime, logging, os
from dotenv import load_dotenv

load_dotenv()

from rich import print
from core.i18n import Translator
from core.models import Budget, TripPreferences
from services import events as esvc, maps as msvc, weather as wsvc, sheets as ss, mailer
from ai import gemini

logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Plan a trip from the command line")
    p.add_argument("--location", "--dest", required=True)
    p.add_argument("--days", type=int, required=True)
    p.add_argument("--start", help="YYYY-MM-DD (default: today)")
    p.add_argument("--budget-min", type=float, default=0)
    p.add_argument("--budget-max", type=float, required=True)
    p.add_argument("--currency", choices=["INR", "USD", "EUR"], default="INR")
    p.add_argument("--interests", default="", help="comma separated, e.g. culture,food")
    p.add_argument("--style", choices=["budget", "luxury", "adventure", "cultural", "wellness"],
                   default="budget")
    p.add_argument("--group-size", type=int, default=1)
    p.add_argument("--accommodation", choices=["hotel", "hostel", "homestay", "resort"],
                   default="hotel")
    p.add_argument("--transport", choices=["public", "private", "mixed"], default="mixed")
    p.add_argument("--lang", default="en")
    p.add_argument("--places", action="store_true", help="list nearby attractions")
    p.add_argument("--export", action="store_true", help="write the XLSX workbook")
    p.add_argument("--email", help="share the workbook / send the itinerary by e-mail")
    args = p.parse_args(argv)

    if args.budget_min >= args.budget_max:
        p.error("Minimum budget must be less than maximum budget")
    if not 1 <= args.days <= 30:
        p.error("Duration must be between 1 and 30 days")
    if not 1 <= args.group_size <= 20:
        p.error("Group size must be between 1 and 20")
    return args


def main(argv=None):
    args = parse_args(argv)
    tr = Translator(args.lang)

    prefs = TripPreferences(
        location=args.location,
        duration=args.days,
        budget=Budget(args.budget_min, args.budget_max, args.currency),
        interests=[i.strip() for i in args.interests.split(",") if i.strip()],
        travel_style=args.style,
        group_size=args.group_size,
        accommodation_type=args.accommodation,
        transportation=args.transport,
        start_date=datetime.date.fromisoformat(args.start) if args.start else None,
    )

    print(f"[cyan]→ {tr.t('itinerary.weather')}…[/]")
    meteo = wsvc.get_weather_forecast(prefs.location, prefs.duration)
    print(f"  {meteo.temperature}°C, {meteo.description}")
    for tip in wsvc.get_weather_based_recommendations(meteo):
        print(f"  • {tip}")

    print(f"[cyan]→ {tr.t('tripPlanner.generating')}[/]")
    itin = gemini.generate_itinerary(prefs)

    print(f"\n[bold]{itin.title}[/]")
    for d in itin.days:
        names = " / ".join(a.name for a in d.activities)
        when = tr.format_date(d.date) if d.date else f"Day {d.day}"
        print(f"[yellow]{when}[/]  {names}")
    print(f"{tr.t('booking.totalAmount')} : {tr.format_currency(itin.actual_cost, args.currency)} "
          f"(budget {tr.format_currency(prefs.budget.max, args.currency)})")

    picks = esvc.get_event_recommendations(prefs.location, prefs.interests, prefs.start, prefs.end)
    if picks:
        print(f"\n[cyan]→ {tr.t('itinerary.events')}[/]")
        for e in picks:
            print(f"  {e.date}  {e.name} @ {e.venue}")

    if args.places:
        coords = msvc.geocode_address(prefs.location)
        if coords:
            lat, lng = coords
            for place in msvc.search_nearby_attractions({"lat": lat, "lng": lng}):
                print(f"  [green]{place.name}[/] ({place.rating}) {place.address}")
        else:
            print(f"[red]{tr.t('common.error')}[/]: could not locate {prefs.location}")

    if args.export or args.email:
        wb_info = ss.generate_workbook(itin, meteo, args.email)
        print(f"\n{tr.t('common.download')}: {wb_info['local_file']}")
        if wb_info["gsheet_url"]:
            print(f"Google Sheet: {wb_info['gsheet_url']}")

        if args.email and input("\nSend the itinerary by e-mail? (y/n) ").lower().startswith("y"):
            mailer.send_itinerary_email(
                args.email, itin,
                attachment_path=wb_info["local_file"],
                gsheet_url=wb_info["gsheet_url"],
            )
            print("[green]E-mail sent![/]")


if __name__ == "__main__":
    main()
