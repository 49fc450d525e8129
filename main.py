"""Simple entrypoint to print a city's weather and outfit locally."""

import sys

from outfit_app.app import WeatherOutfitApp
from outfit_app.logging_config import configure_logging


def main() -> None:
    configure_logging()
    app = WeatherOutfitApp()
    city = sys.argv[1] if len(sys.argv) > 1 else None
    view = app.load_city(city)
    current = view.current
    recommendation = view.advice.recommendation
    print(f"{view.city}: {current.temperature:.0f}°C (體感 {current.feels_like:.0f}°C) {current.condition_description}")
    print(f"穿搭類型: {view.advice.category.display_name}")
    print(f"上衣: {recommendation.top}")
    print(f"褲子: {recommendation.pants}")
    print(f"鞋子: {recommendation.shoes}")
    if recommendation.accessories:
        print(f"配件: {'、'.join(recommendation.accessories)}")
    print(recommendation.notes)
    for message in view.errors:
        print(message)


if __name__ == "__main__":
    main()
