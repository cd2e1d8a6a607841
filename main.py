"""Local entry point: scrape the NPR listing and write the JSON side file."""
from npr_scraper.run import main

if __name__ == "__main__":
    main(["scrape"])
