# Missouri counties plus the independent city of St. Louis
MO_COUNTIES = [
    "Adair County",
    "Andrew County",
    "Atchison County",
    "Audrain County",
    "Barry County",
    "Barton County",
    "Bates County",
    "Benton County",
    "Bollinger County",
    "Boone County",
    "Buchanan County",
    "Butler County",
    "Caldwell County",
    "Callaway County",
    "Camden County",
    "Cape Girardeau County",
    "Carroll County",
    "Carter County",
    "Cass County",
    "Cedar County",
    "Chariton County",
    "Christian County",
    "Clark County",
    "Clay County",
    "Clinton County",
    "Cole County",
    "Cooper County",
    "Crawford County",
    "Dade County",
    "Dallas County",
    "Daviess County",
    "DeKalb County",
    "Dent County",
    "Douglas County",
    "Dunklin County",
    "Franklin County",
    "Gasconade County",
    "Gentry County",
    "Greene County",
    "Grundy County",
    "Harrison County",
    "Henry County",
    "Hickory County",
    "Holt County",
    "Howard County",
    "Howell County",
    "Iron County",
    "Jackson County",
    "Jasper County",
    "Jefferson County",
    "Johnson County",
    "Knox County",
    "Laclede County",
    "Lafayette County",
    "Lawrence County",
    "Lewis County",
    "Lincoln County",
    "Linn County",
    "Livingston County",
    "Macon County",
    "Madison County",
    "Maries County",
    "Marion County",
    "McDonald County",
    "Mercer County",
    "Miller County",
    "Mississippi County",
    "Moniteau County",
    "Monroe County",
    "Montgomery County",
    "Morgan County",
    "New Madrid County",
    "Newton County",
    "Nodaway County",
    "Oregon County",
    "Osage County",
    "Ozark County",
    "Pemiscot County",
    "Perry County",
    "Pettis County",
    "Phelps County",
    "Pike County",
    "Platte County",
    "Polk County",
    "Pulaski County",
    "Putnam County",
    "Ralls County",
    "Randolph County",
    "Ray County",
    "Reynolds County",
    "Ripley County",
    "St. Charles County",
    "St. Clair County",
    "St. Francois County",
    "St. Louis County",
    "St. Louis City",
    "Ste. Genevieve County",
    "Saline County",
    "Schuyler County",
    "Scotland County",
    "Scott County",
    "Shannon County",
    "Shelby County",
    "Stoddard County",
    "Stone County",
    "Sullivan County",
    "Taney County",
    "Texas County",
    "Vernon County",
    "Warren County",
    "Washington County",
    "Wayne County",
    "Webster County",
    "Worth County",
    "Wright County",
]

# Spellings used by the Missouri sources that don't match a county name.
# Kansas City and Joplin report separately from the counties they sit in.
MO_COUNTY_ALIASES = {
    "Kansas City": "Jackson County",
    "St Louis": "St. Louis County",
    "St Charles": "St. Charles County",
    "St Clair": "St. Clair County",
    "Ste Genevieve": "Ste. Genevieve County",
    "St Francois": "St. Francois County",
    "Joplin": "Jasper County",
    "St Louis City": "St. Louis City",
}
