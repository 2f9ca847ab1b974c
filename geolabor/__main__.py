from geolabor.fetch import main

main()
